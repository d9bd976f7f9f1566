from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from courses.models import (
    Assignment,
    AssignmentSubmission,
    Chapter,
    ChapterProgress,
    Course,
    CourseEnrollment,
    Quiz,
    QuizAttempt,
)

QUESTION_BANK = [
    {
        "id": f"q{i}",
        "question": f"Question {i}?",
        "options": ["a", "b", "c", "d"],
        "correctAnswer": i % 4,
        "explanation": f"Because {i % 4}.",
        "difficulty": "EASY",
        "topic": "basics",
    }
    for i in range(4)
]


@pytest.fixture
def instructor(db):
    return get_user_model().objects.create_user(username="instructor", password="pw")


@pytest.fixture
def learner(db):
    return get_user_model().objects.create_user(username="student", password="pw")


@pytest.fixture
def other_learner(db):
    return get_user_model().objects.create_user(username="someone-else", password="pw")


@pytest.fixture
def course(instructor):
    """Two published chapters (one quiz + one verified assignment each),
    one unpublished chapter and the 4-question final exam bank."""
    course = Course.objects.create(
        title="Intro to Testing",
        created_by=instructor,
        is_published=True,
        final_exam_enabled=True,
        final_exam_questions=QUESTION_BANK,
    )
    for position in range(2):
        chapter = Chapter.objects.create(
            course=course,
            title=f"Chapter {position}",
            position=position,
            is_published=True,
        )
        Quiz.objects.create(chapter=chapter, title=f"Quiz {position}", position=0)
        Assignment.objects.create(
            chapter=chapter,
            title=f"Assignment {position}",
            is_published=True,
            verification_status=Assignment.VERIFIED,
        )
    Chapter.objects.create(course=course, title="Draft", position=5, is_published=False)
    return course


@pytest.fixture
def enrolled(learner, course):
    return CourseEnrollment.objects.create(user=learner, course=course)


def complete_everything(user, course):
    """Record progress, quiz attempts and submissions for every published chapter."""
    for chapter in course.chapters.filter(is_published=True):
        ChapterProgress.objects.create(user=user, chapter=chapter, is_completed=True)
        for quiz in chapter.quizzes.all():
            QuizAttempt.objects.create(quiz=quiz, user=user, score=50)
        for assignment in chapter.assignments.all():
            AssignmentSubmission.objects.create(assignment=assignment, student=user)


@pytest.fixture
def completed_learner(learner, course, enrolled):
    complete_everything(learner, course)
    return learner


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def complete_course():
    return complete_everything
