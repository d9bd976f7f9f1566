"""
Final exam gate: eligibility, question delivery and scoring.

All functions work on snapshots from ``courses.services.store``; storing
attempts and issuing certificates happens in the store and signals.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from courses.services.exceptions import (
    CourseNotFoundError,
    FinalExamNotEnabledError,
    InvalidAnswerSetError,
    NoQuestionsError,
)
from courses.services.snapshot import (
    CourseSnapshot,
    ExamAttemptSnapshot,
    ExamQuestion,
    ExamResult,
)

logger = logging.getLogger(__name__)


# Pass and certificate thresholds are both 65, so grade "B"
# (passed, no certificate) can never be awarded.
PASS_THRESHOLD = 65
CERTIFICATION_THRESHOLD = 65
EXCELLENCE_THRESHOLD = 90

EASY = "EASY"
MEDIUM = "MEDIUM"
HARD = "HARD"

# eligibility reason codes
COURSE_NOT_FOUND = "course_not_found"
EXAM_NOT_ENABLED = "exam_not_enabled"
CHAPTERS_INCOMPLETE = "chapters_incomplete"
QUIZZES_INCOMPLETE = "quizzes_incomplete"
ASSIGNMENTS_PENDING_VERIFICATION = "assignments_pending_verification"
ASSIGNMENTS_INCOMPLETE = "assignments_incomplete"


@dataclass(frozen=True)
class ExamProgress:
    chapters_completed: int = 0
    total_chapters: int = 0
    quizzes_completed: int = 0
    total_quizzes: int = 0
    assignments_completed: int = 0
    total_assignments: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class Eligibility:
    eligible: bool
    progress: ExamProgress
    reason: str | None = None
    code: str | None = None

    def to_dict(self):
        return {
            "eligible": self.eligible,
            "reason": self.reason,
            "code": self.code,
            "progress": self.progress.to_dict(),
        }


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# --------------------------------------------------
# Eligibility
# --------------------------------------------------

def check_eligibility(course: CourseSnapshot | None) -> Eligibility:
    """
    Decide whether the learner may sit the final exam.

    Requirements are checked chapters → quizzes → assignments and the first
    unmet one is reported. Only published, instructor-verified assignments
    count, in both the numerator and the denominator.
    """

    if course is None:
        return Eligibility(
            eligible=False,
            progress=ExamProgress(),
            reason="Course not found",
            code=COURSE_NOT_FOUND,
        )

    if not course.final_exam_enabled:
        return Eligibility(
            eligible=False,
            progress=ExamProgress(),
            reason=(
                "The instructor has not enabled the final exam for this course "
                "yet. Please contact your instructor."
            ),
            code=EXAM_NOT_ENABLED,
        )

    chapters = course.chapters
    quizzes = [q for ch in chapters for q in ch.quizzes]
    assignments = [a for ch in chapters for a in ch.assignments if a.is_published]
    verified = [a for a in assignments if a.is_verified]

    progress = ExamProgress(
        chapters_completed=sum(1 for ch in chapters if ch.is_completed),
        total_chapters=len(chapters),
        quizzes_completed=sum(1 for q in quizzes if q.is_completed),
        total_quizzes=len(quizzes),
        assignments_completed=sum(1 for a in verified if a.has_valid_submission),
        total_assignments=len(verified),
    )

    logger.debug("Final exam progress for course %s: %s", course.id, progress)

    if progress.chapters_completed != progress.total_chapters:
        return Eligibility(
            eligible=False,
            progress=progress,
            reason=(
                f"Complete all chapters "
                f"({progress.chapters_completed}/{progress.total_chapters})"
            ),
            code=CHAPTERS_INCOMPLETE,
        )

    if progress.quizzes_completed != progress.total_quizzes:
        return Eligibility(
            eligible=False,
            progress=progress,
            reason=(
                f"Complete all chapter quizzes "
                f"({progress.quizzes_completed}/{progress.total_quizzes})"
            ),
            code=QUIZZES_INCOMPLETE,
        )

    if progress.assignments_completed != progress.total_assignments:
        # handed in, but the instructor has not verified the assignment yet
        awaiting_verification = sum(
            1 for a in assignments
            if not a.is_verified and a.has_valid_submission
        )

        if awaiting_verification:
            return Eligibility(
                eligible=False,
                progress=progress,
                reason=(
                    f"Assignments pending instructor verification "
                    f"({progress.assignments_completed}/{progress.total_assignments} verified)"
                ),
                code=ASSIGNMENTS_PENDING_VERIFICATION,
            )

        return Eligibility(
            eligible=False,
            progress=progress,
            reason=(
                f"Submit all assignments "
                f"({progress.assignments_completed}/{progress.total_assignments})"
            ),
            code=ASSIGNMENTS_INCOMPLETE,
        )

    return Eligibility(eligible=True, progress=progress)


# --------------------------------------------------
# Question delivery
# --------------------------------------------------

def generate_exam(course: CourseSnapshot | None, rng: random.Random | None = None) -> list[ExamQuestion]:
    """
    Return the whole instructor-authored bank in random order.

    This is the path used to deliver the final exam; see
    ``select_exam_questions`` for the difficulty-balanced alternative.
    """

    if course is None:
        raise CourseNotFoundError()

    if not course.final_exam_enabled:
        raise FinalExamNotEnabledError(course.id)

    if not course.final_exam_questions:
        raise NoQuestionsError(course.id)

    questions = list(course.final_exam_questions)
    (rng or random).shuffle(questions)
    return questions


def determine_difficulty(question_text: str) -> str:
    text = (question_text or "").lower()

    if any(word in text for word in ("advanced", "complex", "analyze")):
        return HARD
    if any(word in text for word in ("explain", "describe", "compare")):
        return MEDIUM
    return EASY


def select_exam_questions(
    all_questions: Sequence[ExamQuestion],
    rng: random.Random | None = None,
) -> list[ExamQuestion]:
    """
    Difficulty-balanced subset: roughly 30% easy, 50% medium, 20% hard,
    topped up from whatever is left when a tier runs short.

    Not used by ``generate_exam``.
    """

    target = min(25, max(10, len(all_questions)))

    easy_count = math.ceil(target * 0.3)
    medium_count = math.ceil(target * 0.5)
    hard_count = target - easy_count - medium_count

    easy = [q for q in all_questions if q.difficulty == EASY][:easy_count]
    medium = [q for q in all_questions if q.difficulty == MEDIUM][:medium_count]
    hard = [q for q in all_questions if q.difficulty == HARD][:max(hard_count, 0)]

    selected = easy + medium + hard

    if len(selected) < target:
        remaining = [q for q in all_questions if q not in selected]
        selected.extend(remaining[:target - len(selected)])

    (rng or random).shuffle(selected)
    return selected


# --------------------------------------------------
# Scoring
# --------------------------------------------------

def grade_for_score(score: int) -> str:
    if score >= EXCELLENCE_THRESHOLD:
        return "A+"
    if score >= CERTIFICATION_THRESHOLD:
        return "A"
    if score >= PASS_THRESHOLD:
        return "B"
    if score >= 60:
        return "C"
    if score >= 50:
        return "D"
    return "F"


def score_attempt(user_answers: Sequence[int], correct_answers: Sequence[int]) -> ExamResult:
    """
    Score one answer per question against the answer key.
    """

    total = len(correct_answers)

    if total == 0:
        raise InvalidAnswerSetError("Answer key is empty")

    if len(user_answers) != total:
        raise InvalidAnswerSetError(
            f"Expected {total} answers, got {len(user_answers)}"
        )

    correct = sum(
        1 for given, expected in zip(user_answers, correct_answers)
        if given == expected
    )

    score = _round_half_up(Decimal(correct * 100) / Decimal(total))

    return ExamResult(
        total_questions=total,
        correct_answers=correct,
        score=score,
        passed=score >= PASS_THRESHOLD,
        grade=grade_for_score(score),
        certificate_eligible=score >= CERTIFICATION_THRESHOLD,
    )


def result_from_attempt(attempt: ExamAttemptSnapshot) -> ExamResult:
    total = len(attempt.questions)
    return ExamResult(
        total_questions=total,
        correct_answers=_round_half_up(Decimal(attempt.score * total) / Decimal(100)),
        score=attempt.score,
        passed=attempt.passed,
        grade=attempt.grade,
        certificate_eligible=attempt.certificate_eligible,
    )


def best_result(attempts: Sequence[ExamAttemptSnapshot]) -> ExamResult | None:
    if not attempts:
        return None

    best = max(attempts, key=lambda a: a.score)
    return result_from_attempt(best)
