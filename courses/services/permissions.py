from courses.models import CourseEnrollment


def is_course_instructor(user, course):
    if user.is_superuser:
        return True

    if course.created_by_id is not None and course.created_by_id == user.pk:
        return True

    return False


def has_purchased(user, course):
    return CourseEnrollment.objects.filter(
        user=user,
        course=course,
        is_active=True
    ).exists()
