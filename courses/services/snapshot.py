"""Read-only course snapshots the access and exam services work on.

Everything here is loaded by ``courses.services.store`` for ONE learner and
handed to the pure services, so nothing in this module touches the ORM.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from courses.services.exceptions import InvalidQuestionBankError

VERIFIED = "verified"
COUNTED_SUBMISSION_STATUSES = ("submitted", "graded")


@dataclass(frozen=True)
class ProgressSnapshot:
    """Learner × chapter progress row."""

    is_completed: bool


@dataclass(frozen=True)
class SubmissionSnapshot:
    """One learner submission for an assignment."""

    status: str

    @property
    def counts(self) -> bool:
        return self.status in COUNTED_SUBMISSION_STATUSES


@dataclass(frozen=True)
class QuizSnapshot:
    """Chapter quiz plus how many times the learner attempted it."""

    id: int
    title: str
    position: int
    attempt_count: int = 0
    timeline: int | None = None

    @property
    def is_completed(self) -> bool:
        # any attempt counts, score is not looked at
        return self.attempt_count > 0


@dataclass(frozen=True)
class AssignmentSnapshot:
    """Chapter assignment plus the learner's submissions."""

    id: int
    title: str
    due_date: datetime | None
    verification_status: str
    submissions: tuple[SubmissionSnapshot, ...] = ()
    is_published: bool = True

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VERIFIED

    @property
    def has_valid_submission(self) -> bool:
        return any(sub.counts for sub in self.submissions)

    @property
    def is_completed(self) -> bool:
        return self.is_verified and self.has_valid_submission


@dataclass(frozen=True)
class ChapterSnapshot:
    """Published chapter with its quizzes, assignments and learner progress."""

    id: int
    title: str
    position: int
    quizzes: tuple[QuizSnapshot, ...] = ()
    assignments: tuple[AssignmentSnapshot, ...] = ()
    progress: ProgressSnapshot | None = None
    is_published: bool = True
    is_free: bool = False
    is_preview: bool = False

    @property
    def is_completed(self) -> bool:
        return self.progress is not None and self.progress.is_completed


@dataclass(frozen=True)
class ExamQuestion:
    """One instructor-authored final exam question."""

    id: str
    question: str
    options: tuple[str, ...]
    correct_answer: int
    explanation: str = ""
    difficulty: str = "EASY"
    topic: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any], number: int = 1) -> ExamQuestion:
        """
        Build from the JSON shape stored on ``Course.final_exam_questions``.

        Raises InvalidQuestionBankError when the entry cannot be served;
        ``number`` is the 1-based position used in the message.
        """
        if not isinstance(data, dict):
            raise InvalidQuestionBankError(f"Question {number} must be an object")

        if data.get("id") in (None, ""):
            raise InvalidQuestionBankError(f"Question {number} has no id")

        options = data.get("options")
        if not isinstance(options, list) or not options:
            raise InvalidQuestionBankError(f"Question {number} needs a list of options")

        answer = data.get("correctAnswer", data.get("correct_answer"))
        if isinstance(answer, bool) or not isinstance(answer, int):
            raise InvalidQuestionBankError(
                f"Question {number} needs an integer correctAnswer"
            )
        if not 0 <= answer < len(options):
            raise InvalidQuestionBankError(
                f"Question {number} has a correctAnswer outside its options"
            )

        return cls(
            id=str(data["id"]),
            question=data.get("question", ""),
            options=tuple(options),
            correct_answer=answer,
            explanation=data.get("explanation") or "",
            difficulty=str(data.get("difficulty") or "EASY").upper(),
            topic=data.get("topic") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
            "difficulty": self.difficulty,
            "topic": self.topic,
        }

    def public_dict(self) -> dict[str, Any]:
        """Shape served to learners: no answer, no explanation."""
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "difficulty": self.difficulty,
            "topic": self.topic,
        }


def parse_question_bank(raw: Any) -> tuple[ExamQuestion, ...]:
    """Parse a stored question bank, rejecting bad shapes and repeated ids."""
    if raw in (None, ""):
        return ()

    if not isinstance(raw, list):
        raise InvalidQuestionBankError("The question bank must be a list of questions")

    questions = tuple(
        ExamQuestion.from_dict(entry, number)
        for number, entry in enumerate(raw, start=1)
    )

    seen: set[str] = set()
    for number, question in enumerate(questions, start=1):
        if question.id in seen:
            raise InvalidQuestionBankError(
                f"Question {number} repeats the id {question.id!r}"
            )
        seen.add(question.id)

    return questions


@dataclass(frozen=True)
class CourseSnapshot:
    """Course with its ordered, published chapters for one learner."""

    id: int
    chapters: tuple[ChapterSnapshot, ...] = ()
    final_exam_enabled: bool = False
    final_exam_questions: tuple[ExamQuestion, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExamResult:
    """Scored final exam attempt."""

    total_questions: int
    correct_answers: int
    score: int
    passed: bool
    grade: str
    certificate_eligible: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_questions": self.total_questions,
            "correct_answers": self.correct_answers,
            "score": self.score,
            "passed": self.passed,
            "grade": self.grade,
            "certificate_eligible": self.certificate_eligible,
        }


@dataclass(frozen=True)
class ExamAttemptSnapshot:
    """Stored final exam attempt."""

    id: int
    questions: tuple[dict[str, Any], ...]
    user_answers: tuple[int, ...]
    score: int
    passed: bool
    grade: str
    certificate_eligible: bool
    completed_at: datetime | None = None
