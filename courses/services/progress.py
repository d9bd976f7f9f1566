from courses.services.snapshot import CourseSnapshot


def get_course_progress(course: CourseSnapshot):
    """
    Returns (completed_count, total_count, percentage)
    """

    total = len(course.chapters)

    if total == 0:
        return 0, 0, 0

    completed = sum(1 for ch in course.chapters if ch.is_completed)

    percentage = int((completed / total) * 100)

    return completed, total, percentage


def get_resume_chapter(accessibility):
    """
    Returns:
    - First accessible, incomplete chapter id if exists
    - Otherwise FIRST chapter id of the course (None for an empty course)
    """

    for access in accessibility:
        if access.is_accessible and not access.is_completed:
            return access.chapter_id

    if accessibility:
        return accessibility[0].chapter_id

    return None
