"""
Chapter / quiz / assignment unlocking.

Chapters unlock strictly in order: a chapter opens once the one before it
is COMPLETED. Inside an open chapter the first quiz waits for the chapter
video, each further quiz waits for an attempt on the previous one, and the
assignments wait for every quiz.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from django.utils import timezone

from courses.services.snapshot import CourseSnapshot

logger = logging.getLogger(__name__)


REASON_INSTRUCTOR = "Instructor access"
REASON_FREE = "Free/Preview chapter"
REASON_NOT_PURCHASED = "Course not purchased"
REASON_FIRST = "First chapter"
REASON_PREVIOUS_DONE = "Previous chapter completed"
REASON_PREVIOUS_NOT_DONE = "Previous chapter not completed"


@dataclass(frozen=True)
class ChapterAccess:
    chapter_id: int
    is_accessible: bool
    is_completed: bool
    reason: str


@dataclass(frozen=True)
class QuizAccess:
    id: int
    title: str
    position: int
    is_completed: bool
    is_accessible: bool
    timeline: int | None = None


@dataclass(frozen=True)
class AssignmentAccess:
    id: int
    title: str
    due_date: datetime | None
    is_completed: bool
    is_late: bool
    is_accessible: bool


@dataclass(frozen=True)
class ChapterWithContent:
    id: int
    title: str
    position: int
    is_completed: bool
    is_accessible: bool
    video_completed: bool
    quizzes: tuple[QuizAccess, ...]
    assignments: tuple[AssignmentAccess, ...]

    @property
    def is_satisfied(self) -> bool:
        """Video done plus every quiz attempted and every assignment completed."""
        return (
            self.video_completed
            and all(q.is_completed for q in self.quizzes)
            and all(a.is_completed for a in self.assignments)
        )


# --------------------------------------------------
# Chapter level
# --------------------------------------------------

def evaluate_chapters(
    course: CourseSnapshot,
    is_purchased: bool,
    is_instructor: bool,
) -> list[ChapterAccess]:
    """
    Walk the published chapters in position order and decide which ones
    the learner may open.

    Only actual completion is carried forward: an accessible but unfinished
    chapter keeps the next one locked.
    """

    result: list[ChapterAccess] = []
    previous_completed = True

    for index, chapter in enumerate(course.chapters):
        is_completed = chapter.is_completed

        if is_instructor:
            is_accessible, reason = True, REASON_INSTRUCTOR
        elif chapter.is_free or chapter.is_preview:
            is_accessible, reason = True, REASON_FREE
        elif not is_purchased:
            is_accessible, reason = False, REASON_NOT_PURCHASED
        elif index == 0:
            is_accessible, reason = True, REASON_FIRST
        elif previous_completed:
            is_accessible, reason = True, REASON_PREVIOUS_DONE
        else:
            is_accessible, reason = False, REASON_PREVIOUS_NOT_DONE

        result.append(
            ChapterAccess(
                chapter_id=chapter.id,
                is_accessible=is_accessible,
                is_completed=is_completed,
                reason=reason,
            )
        )

        previous_completed = is_completed

    logger.debug(
        "Evaluated %s chapters for course %s: %s accessible",
        len(result),
        course.id,
        sum(1 for a in result if a.is_accessible),
    )
    return result


# --------------------------------------------------
# Chapter + nested content
# --------------------------------------------------

def evaluate_chapter_contents(
    course: CourseSnapshot,
    is_purchased: bool,
    is_instructor: bool,
    now: datetime | None = None,
    accessibility: Sequence[ChapterAccess] | None = None,
) -> list[ChapterWithContent]:
    """
    Chapter access plus quiz/assignment unlocking inside each chapter.

    Pass ``accessibility`` when ``evaluate_chapters`` already ran for the
    same snapshot and flags.
    """

    now = now or timezone.now()
    if accessibility is None:
        accessibility = evaluate_chapters(course, is_purchased, is_instructor)
    access_by_id = {a.chapter_id: a for a in accessibility}

    chapters = []
    for chapter in course.chapters:
        chapter_accessible = access_by_id[chapter.id].is_accessible
        video_completed = chapter.is_completed

        quizzes = []
        for index, quiz in enumerate(chapter.quizzes):
            quiz_accessible = False
            if chapter_accessible:
                if index == 0:
                    quiz_accessible = video_completed or is_instructor
                else:
                    quiz_accessible = (
                        chapter.quizzes[index - 1].is_completed or is_instructor
                    )

            quizzes.append(
                QuizAccess(
                    id=quiz.id,
                    title=quiz.title,
                    position=quiz.position,
                    is_completed=quiz.is_completed,
                    is_accessible=quiz_accessible,
                    timeline=quiz.timeline,
                )
            )

        all_quizzes_completed = all(q.is_completed for q in quizzes)
        assignments_open = chapter_accessible and (
            all_quizzes_completed or is_instructor
        )

        assignments = []
        for assignment in chapter.assignments:
            completed = assignment.is_completed
            is_late = (
                assignment.due_date is not None
                and now > assignment.due_date
                and not completed
            )
            assignments.append(
                AssignmentAccess(
                    id=assignment.id,
                    title=assignment.title,
                    due_date=assignment.due_date,
                    is_completed=completed,
                    is_late=is_late,
                    is_accessible=assignments_open,
                )
            )

        chapters.append(
            ChapterWithContent(
                id=chapter.id,
                title=chapter.title,
                position=chapter.position,
                is_completed=chapter.is_completed,
                is_accessible=chapter_accessible,
                video_completed=video_completed,
                quizzes=tuple(quizzes),
                assignments=tuple(assignments),
            )
        )

    return chapters


# --------------------------------------------------
# Navigation
# --------------------------------------------------

def _index_of(accessibility: list[ChapterAccess], chapter_id) -> int:
    for index, access in enumerate(accessibility):
        if access.chapter_id == chapter_id:
            return index
    return -1


def next_accessible_chapter(accessibility: list[ChapterAccess], current_chapter_id):
    """
    Returns the id of the first accessible chapter after the current one,
    or None. An unknown current id scans from the start.
    """
    start = _index_of(accessibility, current_chapter_id) + 1

    for access in accessibility[start:]:
        if access.is_accessible:
            return access.chapter_id

    return None


def previous_accessible_chapter(accessibility: list[ChapterAccess], current_chapter_id):
    """
    Returns the id of the closest accessible chapter before the current
    one, or None.
    """
    index = _index_of(accessibility, current_chapter_id)

    for i in range(index - 1, -1, -1):
        if accessibility[i].is_accessible:
            return accessibility[i].chapter_id

    return None
