from django.contrib import admin

from courses.models import (
    Assignment,
    AssignmentSubmission,
    Chapter,
    ChapterProgress,
    Course,
    CourseCertificate,
    CourseEnrollment,
    FinalExamAttempt,
    Quiz,
)
from courses.services.store import verify_submitted_assignments

# =========================
# INLINE CONFIGS
# =========================

class ChapterInline(admin.StackedInline):
    model = Chapter
    extra = 1
    show_change_link = True
    fields = ("title", "position", "is_published", "is_free", "is_preview")
    ordering = ("position",)


class QuizInline(admin.TabularInline):
    model = Quiz
    extra = 1
    fields = ("title", "position", "timeline")
    ordering = ("position",)


class AssignmentInline(admin.TabularInline):
    model = Assignment
    extra = 0
    show_change_link = True
    fields = ("title", "due_date", "is_published", "verification_status")


# =========================
# MAIN ADMINS
# =========================
@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "created_by",
        "is_published",
        "final_exam_enabled",
        "created_at",
    )

    list_filter = (
        "is_published",
        "final_exam_enabled",
        "created_at",
    )

    search_fields = (
        "title",
        "description",
    )

    prepopulated_fields = {"slug": ("title",)}

    inlines = (ChapterInline,)

    actions = ("verify_assignments",)

    fieldsets = (
        ("Basic Info", {
            "fields": (
                "title",
                "slug",
                "description",
                "created_by",
                "is_published",
            )
        }),

        ("Final Exam", {
            "fields": (
                "final_exam_enabled",
                "final_exam_questions",
            ),
            "description": (
                "Each question: id, question, options, correctAnswer "
                "(option index), explanation, difficulty (EASY/MEDIUM/HARD), topic."
            ),
        }),

        ("Meta", {
            "fields": ("created_at",),
        }),
    )

    readonly_fields = ("created_at",)

    @admin.action(description="Verify submitted assignments")
    def verify_assignments(self, request, queryset):
        total = sum(verify_submitted_assignments(course) for course in queryset)
        self.message_user(request, f"{total} assignments verified.")


@admin.register(Chapter)
class ChapterAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "course",
        "position",
        "is_published",
        "is_free",
        "is_preview",
    )
    list_filter = ("course", "is_published")
    search_fields = ("title",)
    ordering = ("course", "position")
    inlines = (QuizInline, AssignmentInline)


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "chapter",
        "due_date",
        "is_published",
        "verification_status",
    )
    list_filter = ("verification_status", "is_published", "chapter__course")
    search_fields = ("title",)


@admin.register(AssignmentSubmission)
class AssignmentSubmissionAdmin(admin.ModelAdmin):
    list_display = ("assignment", "student", "status", "grade", "submitted_at")
    list_filter = ("status",)


@admin.register(FinalExamAttempt)
class FinalExamAttemptAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "course",
        "score",
        "grade",
        "passed",
        "certificate_eligible",
        "completed_at",
    )
    list_filter = ("passed", "certificate_eligible", "course")
    readonly_fields = ("questions", "user_answers")


admin.site.register(ChapterProgress)
admin.site.register(CourseEnrollment)
admin.site.register(CourseCertificate)
