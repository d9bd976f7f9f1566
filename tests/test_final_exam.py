import random

import pytest

from courses.services.exceptions import (
    CourseNotFoundError,
    FinalExamNotEnabledError,
    InvalidAnswerSetError,
    InvalidQuestionBankError,
    NoQuestionsError,
)
from courses.services.final_exam import (
    ASSIGNMENTS_INCOMPLETE,
    ASSIGNMENTS_PENDING_VERIFICATION,
    CHAPTERS_INCOMPLETE,
    COURSE_NOT_FOUND,
    EXAM_NOT_ENABLED,
    QUIZZES_INCOMPLETE,
    best_result,
    check_eligibility,
    determine_difficulty,
    generate_exam,
    grade_for_score,
    score_attempt,
    select_exam_questions,
)
from courses.services.snapshot import (
    AssignmentSnapshot,
    ChapterSnapshot,
    CourseSnapshot,
    ExamAttemptSnapshot,
    ExamQuestion,
    ProgressSnapshot,
    QuizSnapshot,
    SubmissionSnapshot,
    parse_question_bank,
)

SUBMITTED = (SubmissionSnapshot("submitted"),)


def _question(n: int, difficulty: str = "EASY") -> ExamQuestion:
    return ExamQuestion(
        id=f"q{n}",
        question=f"Question {n}",
        options=("a", "b", "c", "d"),
        correct_answer=n % 4,
        difficulty=difficulty,
    )


def _course(chapters=(), enabled=True, questions=()) -> CourseSnapshot:
    return CourseSnapshot(
        id=7,
        chapters=tuple(chapters),
        final_exam_enabled=enabled,
        final_exam_questions=tuple(questions),
    )


def _done_chapter(chapter_id: int, assignments=(), quizzes=None) -> ChapterSnapshot:
    if quizzes is None:
        quizzes = (QuizSnapshot(chapter_id * 10, "quiz", 0, attempt_count=1),)
    return ChapterSnapshot(
        id=chapter_id,
        title=f"Chapter {chapter_id}",
        position=chapter_id,
        progress=ProgressSnapshot(is_completed=True),
        quizzes=tuple(quizzes),
        assignments=tuple(assignments),
    )


# --------------------------------------------------
# Scoring
# --------------------------------------------------

def test_score_attempt_three_of_four() -> None:
    result = score_attempt([1, 2, 0, 3], [1, 2, 1, 3])

    assert result.total_questions == 4
    assert result.correct_answers == 3
    assert result.score == 75
    assert result.passed is True
    assert result.certificate_eligible is True
    assert result.grade == "A"


@pytest.mark.parametrize(
    ("score", "grade"),
    [
        (100, "A+"),
        (90, "A+"),
        (89, "A"),
        (65, "A"),
        (64, "C"),
        (60, "C"),
        (59, "D"),
        (55, "D"),
        (50, "D"),
        (49, "F"),
        (40, "F"),
        (0, "F"),
    ],
)
def test_grade_boundaries(score: int, grade: str) -> None:
    assert grade_for_score(score) == grade


def test_pass_without_certificate_grade_is_never_awarded() -> None:
    assert "B" not in {grade_for_score(score) for score in range(101)}


def test_score_rounds_half_up() -> None:
    # 1/8 = 12.5%
    result = score_attempt([0] + [1] * 7, [0] * 8)

    assert result.score == 13
    assert result.passed is False
    assert result.grade == "F"


def test_failing_score_is_not_certificate_eligible() -> None:
    result = score_attempt([0, 0, 0], [0, 1, 2])

    assert result.score == 33
    assert result.passed is False
    assert result.certificate_eligible is False


def test_score_rejects_mismatched_lengths() -> None:
    with pytest.raises(InvalidAnswerSetError):
        score_attempt([1, 2], [1, 2, 3])


def test_score_rejects_empty_answer_key() -> None:
    with pytest.raises(InvalidAnswerSetError):
        score_attempt([], [])


# --------------------------------------------------
# Eligibility
# --------------------------------------------------

def test_missing_course_is_not_eligible() -> None:
    result = check_eligibility(None)

    assert result.eligible is False
    assert result.code == COURSE_NOT_FOUND
    assert result.progress.total_chapters == 0


def test_disabled_exam_short_circuits_complete_progress() -> None:
    verified = AssignmentSnapshot(1, "a", None, "verified", SUBMITTED)
    course = _course([_done_chapter(1, [verified])], enabled=False)

    result = check_eligibility(course)

    assert result.eligible is False
    assert result.code == EXAM_NOT_ENABLED
    assert "not enabled" in result.reason


def test_fully_complete_course_is_eligible() -> None:
    verified = AssignmentSnapshot(1, "a", None, "verified", SUBMITTED)
    course = _course([_done_chapter(1, [verified]), _done_chapter(2)])

    result = check_eligibility(course)

    assert result.eligible is True
    assert result.reason is None
    assert result.progress.to_dict() == {
        "chapters_completed": 2,
        "total_chapters": 2,
        "quizzes_completed": 2,
        "total_quizzes": 2,
        "assignments_completed": 1,
        "total_assignments": 1,
    }


def test_chapters_are_checked_before_quizzes() -> None:
    unfinished = ChapterSnapshot(
        id=2,
        title="Chapter 2",
        position=2,
        quizzes=(QuizSnapshot(20, "quiz", 0),),
    )
    course = _course([_done_chapter(1), unfinished])

    result = check_eligibility(course)

    assert result.code == CHAPTERS_INCOMPLETE
    assert result.reason == "Complete all chapters (1/2)"


def test_unattempted_quiz_blocks_exam() -> None:
    chapter = _done_chapter(
        1,
        quizzes=(QuizSnapshot(1, "q0", 0, attempt_count=3), QuizSnapshot(2, "q1", 1)),
    )

    result = check_eligibility(_course([chapter]))

    assert result.code == QUIZZES_INCOMPLETE
    assert result.reason == "Complete all chapter quizzes (1/2)"


def test_missing_submission_reports_submit_all_assignments() -> None:
    assignments = [
        AssignmentSnapshot(1, "done", None, "verified", SUBMITTED),
        AssignmentSnapshot(2, "todo", None, "verified"),
    ]

    result = check_eligibility(_course([_done_chapter(1, assignments)]))

    assert result.code == ASSIGNMENTS_INCOMPLETE
    assert result.reason == "Submit all assignments (1/2)"


def test_graded_but_unverified_work_reports_pending_verification() -> None:
    assignments = [
        AssignmentSnapshot(1, "todo", None, "verified"),
        AssignmentSnapshot(2, "graded, awaiting review", None, "pending", (SubmissionSnapshot("graded"),)),
    ]

    result = check_eligibility(_course([_done_chapter(1, assignments)]))

    assert result.eligible is False
    assert result.code == ASSIGNMENTS_PENDING_VERIFICATION
    assert result.progress.assignments_completed == 0
    assert result.progress.total_assignments == 1
    assert "pending instructor verification" in result.reason


def test_unverified_assignments_are_left_out_entirely() -> None:
    assignments = [
        AssignmentSnapshot(1, "pending", None, "pending", SUBMITTED),
        AssignmentSnapshot(2, "rejected", None, "rejected"),
    ]

    result = check_eligibility(_course([_done_chapter(1, assignments)]))

    assert result.eligible is True
    assert result.progress.total_assignments == 0


def test_unpublished_assignments_do_not_count() -> None:
    hidden = AssignmentSnapshot(1, "hidden", None, "verified", is_published=False)

    result = check_eligibility(_course([_done_chapter(1, [hidden])]))

    assert result.eligible is True


# --------------------------------------------------
# Question delivery
# --------------------------------------------------

def test_generate_exam_returns_a_permutation_of_the_bank() -> None:
    bank = [_question(n) for n in range(20)]
    course = _course(questions=bank)

    first = generate_exam(course, rng=random.Random(1))
    second = generate_exam(course, rng=random.Random(2))

    assert sorted(q.id for q in first) == sorted(q.id for q in bank)
    assert len(first) == len(bank)
    assert [q.id for q in first] != [q.id for q in second]
    assert list(course.final_exam_questions) == bank


def test_generate_exam_errors() -> None:
    with pytest.raises(CourseNotFoundError):
        generate_exam(None)

    with pytest.raises(FinalExamNotEnabledError):
        generate_exam(_course(enabled=False, questions=[_question(1)]))

    with pytest.raises(NoQuestionsError):
        generate_exam(_course(enabled=True, questions=[]))


def test_select_exam_questions_balances_difficulty() -> None:
    bank = (
        [_question(n, "EASY") for n in range(10)]
        + [_question(n, "MEDIUM") for n in range(10, 20)]
        + [_question(n, "HARD") for n in range(20, 30)]
    )

    selected = select_exam_questions(bank, rng=random.Random(0))
    by_difficulty = {
        d: sum(1 for q in selected if q.difficulty == d)
        for d in ("EASY", "MEDIUM", "HARD")
    }

    assert len(selected) == 25
    assert len({q.id for q in selected}) == 25
    # medium tier runs short (10 of 13), the gap is filled in bank order
    assert by_difficulty == {"EASY": 10, "MEDIUM": 10, "HARD": 5}


def test_select_exam_questions_tops_up_short_tiers() -> None:
    bank = [_question(n, "EASY") for n in range(12)]

    selected = select_exam_questions(bank, rng=random.Random(0))

    assert sorted(q.id for q in selected) == sorted(q.id for q in bank)


def test_select_exam_questions_small_bank() -> None:
    bank = [_question(n, "HARD") for n in range(4)]

    assert len(select_exam_questions(bank)) == 4


@pytest.mark.parametrize(
    ("text", "difficulty"),
    [
        ("Analyze the trade-offs of caching", "HARD"),
        ("An ADVANCED topic", "HARD"),
        ("Explain what a fixture is", "MEDIUM"),
        ("Compare unit and integration tests", "MEDIUM"),
        ("What is pytest?", "EASY"),
        ("", "EASY"),
    ],
)
def test_determine_difficulty(text: str, difficulty: str) -> None:
    assert determine_difficulty(text) == difficulty


def test_exam_question_round_trip_from_bank_json() -> None:
    raw = {
        "id": 5,
        "question": "Pick b",
        "options": ["a", "b"],
        "correctAnswer": 1,
        "explanation": "b is right",
        "difficulty": "medium",
        "topic": "letters",
    }

    question = ExamQuestion.from_dict(raw)

    assert question.id == "5"
    assert question.correct_answer == 1
    assert question.difficulty == "MEDIUM"
    assert "correctAnswer" not in question.public_dict()
    assert "explanation" not in question.public_dict()


# --------------------------------------------------
# Best result
# --------------------------------------------------

def _attempt(attempt_id: int, score: int, questions: int = 4) -> ExamAttemptSnapshot:
    return ExamAttemptSnapshot(
        id=attempt_id,
        questions=tuple({"id": f"q{n}"} for n in range(questions)),
        user_answers=tuple(0 for _ in range(questions)),
        score=score,
        passed=score >= 65,
        grade=grade_for_score(score),
        certificate_eligible=score >= 65,
    )


def test_best_result_none_without_attempts() -> None:
    assert best_result([]) is None


def test_best_result_picks_highest_score() -> None:
    result = best_result([_attempt(1, 50), _attempt(2, 75), _attempt(3, 25)])

    assert result.score == 75
    assert result.total_questions == 4
    assert result.correct_answers == 3
    assert result.grade == "A"
    assert result.certificate_eligible is True


# --------------------------------------------------
# Question bank parsing
# --------------------------------------------------

def _raw(n: int, **overrides) -> dict:
    raw = {"id": f"q{n}", "question": f"Question {n}", "options": ["a", "b"], "correctAnswer": 0}
    raw.update(overrides)
    return raw


@pytest.mark.parametrize(
    "bank, message",
    [
        ({"q0": _raw(0)}, "must be a list"),
        (["just text"], "Question 1 must be an object"),
        ([_raw(0), {"question": "no id yet", "options": ["a", "b"], "correctAnswer": 0}], "Question 2 has no id"),
        ([_raw(0, options=[])], "needs a list of options"),
        ([_raw(0, correctAnswer=None)], "integer correctAnswer"),
        ([_raw(0, correctAnswer="1")], "integer correctAnswer"),
        ([_raw(0, correctAnswer=True)], "integer correctAnswer"),
        ([_raw(0, correctAnswer=2)], "outside its options"),
        ([_raw(0), _raw(1, id="q0")], "repeats the id"),
    ],
)
def test_parse_question_bank_rejects_malformed_entries(bank, message: str) -> None:
    with pytest.raises(InvalidQuestionBankError, match=message):
        parse_question_bank(bank)


@pytest.mark.parametrize("bank", [None, "", []])
def test_parse_question_bank_empty(bank) -> None:
    assert parse_question_bank(bank) == ()


def test_parse_question_bank_accepts_snake_case_answer() -> None:
    raw = _raw(0, correct_answer=1)
    del raw["correctAnswer"]

    [question] = parse_question_bank([raw])

    assert question.correct_answer == 1
