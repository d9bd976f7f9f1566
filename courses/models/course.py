from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.text import slugify

from courses.services.exceptions import InvalidQuestionBankError
from courses.services.snapshot import parse_question_bank


# =====================================================
# COURSE
# =====================================================

class Course(models.Model):
    title = models.CharField(max_length=255)
    slug = models.SlugField(unique=True, blank=True)
    description = models.TextField(blank=True)

    is_published = models.BooleanField(default=False)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="courses_created"
    )

    # ================= FINAL EXAM =================
    final_exam_enabled = models.BooleanField(default=False)

    final_exam_questions = models.JSONField(
        default=list,
        blank=True,
        help_text=(
            "Instructor-authored question bank: list of "
            "{id, question, options, correctAnswer, explanation, difficulty, topic}"
        )
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title

    def clean(self):
        super().clean()

        try:
            parse_question_bank(self.final_exam_questions)
        except InvalidQuestionBankError as exc:
            raise ValidationError({"final_exam_questions": str(exc)})

    def save(self, *args, **kwargs):
        if not self.slug:
            base_slug = slugify(self.title) or "course"
            unique_slug = base_slug
            counter = 1

            while Course.objects.filter(slug=unique_slug).exists():
                unique_slug = f"{base_slug}-{counter}"
                counter += 1

            self.slug = unique_slug

        super().save(*args, **kwargs)
