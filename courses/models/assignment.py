from django.db import models
from django.conf import settings

from .chapter import Chapter


# =====================================================
# ASSIGNMENT
# =====================================================

class Assignment(models.Model):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"

    VERIFICATION_CHOICES = [
        (PENDING, "Pending"),
        (VERIFIED, "Verified"),
        (REJECTED, "Rejected"),
    ]

    chapter = models.ForeignKey(
        Chapter,
        on_delete=models.CASCADE,
        related_name="assignments"
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    due_date = models.DateTimeField(null=True, blank=True)

    is_published = models.BooleanField(default=False)

    # set by the instructor; only verified work counts towards completion
    verification_status = models.CharField(
        max_length=20,
        choices=VERIFICATION_CHOICES,
        default=PENDING,
        db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.chapter.title} → {self.title}"


class AssignmentSubmission(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_SUBMITTED = "submitted"
    STATUS_GRADED = "graded"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SUBMITTED, "Submitted"),
        (STATUS_GRADED, "Graded"),
    ]

    # statuses that count as handed in
    COUNTED_STATUSES = (STATUS_SUBMITTED, STATUS_GRADED)

    assignment = models.ForeignKey(
        Assignment,
        on_delete=models.CASCADE,
        related_name="submissions"
    )

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="assignment_submissions"
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_SUBMITTED
    )

    grade = models.FloatField(null=True, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.student} → {self.assignment} ({self.status})"
