import logging
import uuid

from courses.models import CourseCertificate

logger = logging.getLogger(__name__)


def issue_certificate_if_eligible(user, course, result, attempt=None):
    """
    Issues certificate if:
    - the exam result is certificate eligible
    - certificate does not already exist
    """

    if not result.certificate_eligible:
        return None

    certificate, created = CourseCertificate.objects.get_or_create(
        user=user,
        course=course,
        defaults={
            "certificate_id": f"CERT-{uuid.uuid4().hex[:12].upper()}",
            "attempt": attempt,
        }
    )

    if created:
        logger.info(
            "Issued certificate %s to user %s for course %s",
            certificate.certificate_id,
            user.pk,
            course.pk,
        )

    return certificate
