from django.db import models
from django.conf import settings

from .chapter import Chapter


# =====================================================
# CHAPTER QUIZ
# =====================================================

class Quiz(models.Model):
    chapter = models.ForeignKey(
        Chapter,
        on_delete=models.CASCADE,
        related_name="quizzes"
    )

    title = models.CharField(max_length=255)
    position = models.PositiveIntegerField(default=0)

    # video timestamp (seconds) the quiz pops up at, if any
    timeline = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["position"]

    def __str__(self):
        return f"{self.chapter.title} → {self.title}"


class QuizAttempt(models.Model):
    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.CASCADE,
        related_name="attempts"
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="quiz_attempts"
    )

    score = models.FloatField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "quiz"], name="quizattempt_user_quiz_idx"),
        ]

    def __str__(self):
        return f"QA:{self.quiz_id} U:{self.user_id}"
