from django.db import models
from django.conf import settings
from django.utils import timezone

from .course import Course


# =====================================================
# CHAPTER
# =====================================================

class Chapter(models.Model):
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="chapters"
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    video_url = models.URLField(blank=True, null=True)

    position = models.PositiveIntegerField()

    is_published = models.BooleanField(default=False)
    is_free = models.BooleanField(default=False)
    is_preview = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["course", "position"],
                name="unique_course_chapter_position"
            )
        ]
        indexes = [
            models.Index(fields=["course", "position"], name="chapter_course_position_idx"),
        ]

    def save(self, *args, **kwargs):
        # Auto-assign position if not provided
        if self.position is None:
            max_position = Chapter.objects.filter(
                course=self.course
            ).aggregate(models.Max("position"))["position__max"]

            self.position = 0 if max_position is None else max_position + 1

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.course.title} → {self.title}"


# =====================================================
# CHAPTER PROGRESS
# =====================================================
class ChapterProgress(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chapter_progress"
    )

    chapter = models.ForeignKey(
        Chapter,
        on_delete=models.CASCADE,
        related_name="progress_records"
    )

    is_completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("user", "chapter")

    def mark_completed(self):
        if not self.is_completed:
            self.is_completed = True
            self.completed_at = timezone.now()
            self.save()

    def __str__(self):
        return f"{self.user} → {self.chapter}"
