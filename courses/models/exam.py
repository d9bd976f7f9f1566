from django.db import models
from django.conf import settings
from django.utils import timezone

from .course import Course


# =====================================================
# FINAL EXAM ATTEMPT
# =====================================================
class FinalExamAttempt(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="final_exam_attempts"
    )

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="final_exam_attempts"
    )

    questions = models.JSONField(
        default=list,
        help_text="Question set exactly as served, in order"
    )
    user_answers = models.JSONField(
        default=list,
        help_text="Chosen option index per question"
    )

    score = models.PositiveIntegerField()
    passed = models.BooleanField(default=False)
    grade = models.CharField(max_length=3)
    certificate_eligible = models.BooleanField(default=False)

    completed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-completed_at"]
        indexes = [
            models.Index(fields=["user", "course"], name="examattempt_user_course_idx"),
        ]

    def __str__(self):
        return f"FE:{self.course_id} U:{self.user_id} {self.score}% ({self.grade})"
