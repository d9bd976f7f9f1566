from courses.services.access import ChapterAccess
from courses.services.progress import get_course_progress, get_resume_chapter
from courses.services.snapshot import ChapterSnapshot, CourseSnapshot, ProgressSnapshot


def _chapter(chapter_id: int, completed: bool) -> ChapterSnapshot:
    return ChapterSnapshot(
        id=chapter_id,
        title=str(chapter_id),
        position=chapter_id,
        progress=ProgressSnapshot(is_completed=completed),
    )


def test_course_progress_percentage() -> None:
    course = CourseSnapshot(id=1, chapters=(_chapter(1, True), _chapter(2, False), _chapter(3, False)))

    assert get_course_progress(course) == (1, 3, 33)


def test_course_progress_empty_course() -> None:
    assert get_course_progress(CourseSnapshot(id=1)) == (0, 0, 0)


def test_resume_chapter_is_first_open_unfinished_one() -> None:
    access = [
        ChapterAccess(1, True, True, ""),
        ChapterAccess(2, True, False, ""),
        ChapterAccess(3, False, False, ""),
    ]

    assert get_resume_chapter(access) == 2


def test_resume_chapter_falls_back_to_first_chapter() -> None:
    finished = [ChapterAccess(1, True, True, ""), ChapterAccess(2, True, True, "")]

    assert get_resume_chapter(finished) == 1
    assert get_resume_chapter([]) is None
