from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import FinalExamAttempt
from .services.certificates import issue_certificate_if_eligible
from .services.final_exam import result_from_attempt
from .services.store import attempt_snapshot


@receiver(post_save, sender=FinalExamAttempt)
def issue_certificate_on_attempt(sender, instance, created, **kwargs):
    if not created or not instance.certificate_eligible:
        return

    issue_certificate_if_eligible(
        instance.user,
        instance.course,
        result_from_attempt(attempt_snapshot(instance)),
        attempt=instance,
    )
