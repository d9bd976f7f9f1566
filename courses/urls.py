from django.urls import path

from .views import api_views

app_name = "courses"
urlpatterns = [

    # ================= STUDENT =================

    path("<int:course_id>/chapters/", api_views.chapter_list, name="chapter_list"),

    path("<int:course_id>/final-exam/", api_views.start_final_exam, name="final_exam_start"),
    path("<int:course_id>/final-exam/eligibility/", api_views.final_exam_eligibility, name="final_exam_eligibility"),
    path("<int:course_id>/final-exam/submit/", api_views.submit_final_exam, name="final_exam_submit"),
    path("<int:course_id>/final-exam/best/", api_views.final_exam_best_result, name="final_exam_best"),
    path("<int:course_id>/final-exam/history/", api_views.final_exam_history, name="final_exam_history"),

    # ================= INSTRUCTOR =================

    path("<int:course_id>/verify-assignments/", api_views.verify_assignments, name="verify_assignments"),
]
