"""
ORM reads/writes behind the access and final exam services.

Every read returns frozen snapshots scoped to ONE learner so the services
never query the database themselves.
"""

import logging

from django.db import transaction
from django.db.models import Count, Prefetch, Q

from courses.models import (
    Assignment,
    AssignmentSubmission,
    Chapter,
    ChapterProgress,
    Course,
    FinalExamAttempt,
    Quiz,
)
from courses.services.exceptions import InvalidQuestionBankError
from courses.services.final_exam import best_result
from courses.services.snapshot import (
    AssignmentSnapshot,
    ChapterSnapshot,
    CourseSnapshot,
    ExamAttemptSnapshot,
    ProgressSnapshot,
    QuizSnapshot,
    SubmissionSnapshot,
    parse_question_bank,
)

logger = logging.getLogger(__name__)


# --------------------------------------------------
# Reads
# --------------------------------------------------

def get_course_with_chapters(course_id, user):
    """
    Returns the CourseSnapshot for `user`, or None if the course does not exist.

    - chapters: published only, ordered by position
    - quizzes: ordered by position, with the user's attempt count
    - assignments: published only, ordered by creation, with the user's submissions
    """

    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        return None

    chapters = (
        Chapter.objects
        .filter(course=course, is_published=True)
        .order_by("position")
        .prefetch_related(
            Prefetch(
                "progress_records",
                queryset=ChapterProgress.objects.filter(user=user),
                to_attr="user_progress",
            ),
            Prefetch(
                "quizzes",
                queryset=Quiz.objects.order_by("position", "id").annotate(
                    user_attempts=Count("attempts", filter=Q(attempts__user=user))
                ),
                to_attr="ordered_quizzes",
            ),
            Prefetch(
                "assignments",
                queryset=Assignment.objects.filter(is_published=True)
                .order_by("created_at", "id")
                .prefetch_related(
                    Prefetch(
                        "submissions",
                        queryset=AssignmentSubmission.objects.filter(student=user),
                        to_attr="user_submissions",
                    )
                ),
                to_attr="published_assignments",
            ),
        )
    )

    return CourseSnapshot(
        id=course.pk,
        chapters=tuple(_chapter_snapshot(ch) for ch in chapters),
        final_exam_enabled=course.final_exam_enabled,
        final_exam_questions=_question_bank(course),
    )


def get_progress(user, chapter_id):
    progress = ChapterProgress.objects.filter(
        user=user,
        chapter_id=chapter_id
    ).first()

    if progress is None:
        return None

    return ProgressSnapshot(is_completed=progress.is_completed)


def get_exam_attempts(user, course_id):
    """
    Returns the user's final exam attempts, newest first.
    """

    attempts = FinalExamAttempt.objects.filter(
        user=user,
        course_id=course_id
    ).order_by("-completed_at", "-id")

    return [attempt_snapshot(a) for a in attempts]


def get_best_result(user, course_id):
    return best_result(get_exam_attempts(user, course_id))


# --------------------------------------------------
# Writes
# --------------------------------------------------

def save_exam_attempt(user, course_id, questions, answers, result):
    """
    Persist a scored attempt and return its id.

    `questions` are ExamQuestion objects in the order they were served.
    """

    attempt = FinalExamAttempt.objects.create(
        user=user,
        course_id=course_id,
        questions=[q.to_dict() for q in questions],
        user_answers=list(answers),
        score=result.score,
        passed=result.passed,
        grade=result.grade,
        certificate_eligible=result.certificate_eligible,
    )

    logger.info(
        "Final exam attempt %s saved: user=%s course=%s score=%s grade=%s",
        attempt.pk,
        user.pk,
        course_id,
        result.score,
        result.grade,
    )
    return attempt.pk


def verify_submitted_assignments(course):
    """
    Mark every pending assignment of `course` that has a submitted or
    graded submission as verified. Returns the number updated.
    """

    with transaction.atomic():
        updated = (
            Assignment.objects
            .filter(
                chapter__course=course,
                verification_status=Assignment.PENDING,
                submissions__status__in=AssignmentSubmission.COUNTED_STATUSES,
            )
            .distinct()
            .values_list("pk", flat=True)
        )
        count = Assignment.objects.filter(pk__in=list(updated)).update(
            verification_status=Assignment.VERIFIED
        )

    logger.info("Verified %s assignments for course %s", count, course.pk)
    return count


# --------------------------------------------------
# Helpers
# --------------------------------------------------

def _question_bank(course):
    # a malformed bank is served as empty so only the exam endpoints refuse
    try:
        return parse_question_bank(course.final_exam_questions)
    except InvalidQuestionBankError as exc:
        logger.warning(
            "Ignoring invalid final exam question bank for course %s: %s",
            course.pk,
            exc,
        )
        return ()


def _chapter_snapshot(chapter):
    progress = chapter.user_progress[0] if chapter.user_progress else None

    return ChapterSnapshot(
        id=chapter.pk,
        title=chapter.title,
        position=chapter.position,
        is_published=chapter.is_published,
        is_free=chapter.is_free,
        is_preview=chapter.is_preview,
        progress=(
            ProgressSnapshot(is_completed=progress.is_completed)
            if progress else None
        ),
        quizzes=tuple(
            QuizSnapshot(
                id=quiz.pk,
                title=quiz.title,
                position=quiz.position,
                attempt_count=quiz.user_attempts,
                timeline=quiz.timeline,
            )
            for quiz in chapter.ordered_quizzes
        ),
        assignments=tuple(
            AssignmentSnapshot(
                id=assignment.pk,
                title=assignment.title,
                due_date=assignment.due_date,
                verification_status=assignment.verification_status,
                is_published=assignment.is_published,
                submissions=tuple(
                    SubmissionSnapshot(status=sub.status)
                    for sub in assignment.user_submissions
                ),
            )
            for assignment in chapter.published_assignments
        ),
    )


def attempt_snapshot(attempt):
    return ExamAttemptSnapshot(
        id=attempt.pk,
        questions=tuple(attempt.questions or ()),
        user_answers=tuple(attempt.user_answers or ()),
        score=attempt.score,
        passed=attempt.passed,
        grade=attempt.grade,
        certificate_eligible=attempt.certificate_eligible,
        completed_at=attempt.completed_at,
    )
