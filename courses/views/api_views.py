import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from courses.models import Course, CourseCertificate
from courses.serializers import (
    FinalExamAttemptSerializer,
    FinalExamSubmissionSerializer,
)
from courses.services import store
from courses.services.access import (
    evaluate_chapter_contents,
    evaluate_chapters,
    next_accessible_chapter,
    previous_accessible_chapter,
)
from courses.services.exceptions import (
    CourseNotFoundError,
    FinalExamError,
    FinalExamNotEnabledError,
    InvalidAnswerSetError,
    NoQuestionsError,
)
from courses.services.final_exam import (
    check_eligibility,
    generate_exam,
    score_attempt,
)
from courses.services.permissions import has_purchased, is_course_instructor
from courses.services.progress import get_course_progress, get_resume_chapter

logger = logging.getLogger(__name__)


ERROR_STATUS = {
    CourseNotFoundError: status.HTTP_404_NOT_FOUND,
    FinalExamNotEnabledError: status.HTTP_403_FORBIDDEN,
    NoQuestionsError: status.HTTP_409_CONFLICT,
    InvalidAnswerSetError: status.HTTP_400_BAD_REQUEST,
}


def _error_response(exc: FinalExamError):
    code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return Response({"detail": str(exc)}, status=code)


def _chapter_payload(chapter):
    return {
        "id": chapter.id,
        "title": chapter.title,
        "position": chapter.position,
        "is_completed": chapter.is_completed,
        "is_accessible": chapter.is_accessible,
        "video_completed": chapter.video_completed,
        "quizzes": [
            {
                "id": q.id,
                "title": q.title,
                "position": q.position,
                "timeline": q.timeline,
                "is_completed": q.is_completed,
                "is_accessible": q.is_accessible,
            }
            for q in chapter.quizzes
        ],
        "assignments": [
            {
                "id": a.id,
                "title": a.title,
                "due_date": a.due_date,
                "is_completed": a.is_completed,
                "is_late": a.is_late,
                "is_accessible": a.is_accessible,
            }
            for a in chapter.assignments
        ],
    }


# -------------------------
# Chapters
# -------------------------
@api_view(["GET"])
@permission_classes([IsAuthenticated])
def chapter_list(request, course_id):
    course = get_object_or_404(Course, pk=course_id)
    snapshot = store.get_course_with_chapters(course.pk, request.user)

    is_instructor = is_course_instructor(request.user, course)
    is_purchased = has_purchased(request.user, course)

    accessibility = evaluate_chapters(snapshot, is_purchased, is_instructor)
    chapters = evaluate_chapter_contents(
        snapshot, is_purchased, is_instructor, accessibility=accessibility
    )
    completed, total, percentage = get_course_progress(snapshot)

    payload = {
        "course_id": course.pk,
        "is_instructor": is_instructor,
        "is_purchased": is_purchased,
        "progress": {
            "completed": completed,
            "total": total,
            "percentage": percentage,
        },
        "resume_chapter_id": get_resume_chapter(accessibility),
        "chapters": [_chapter_payload(ch) for ch in chapters],
    }

    current = request.query_params.get("current")
    if current:
        try:
            current_id = int(current)
        except ValueError:
            return Response({"detail": "Invalid chapter id."}, status=status.HTTP_400_BAD_REQUEST)

        payload["next_chapter_id"] = next_accessible_chapter(accessibility, current_id)
        payload["previous_chapter_id"] = previous_accessible_chapter(accessibility, current_id)

    return Response(payload)


# -------------------------
# Final exam
# -------------------------
@api_view(["GET"])
@permission_classes([IsAuthenticated])
def final_exam_eligibility(request, course_id):
    snapshot = store.get_course_with_chapters(course_id, request.user)
    return Response(check_eligibility(snapshot).to_dict())


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def start_final_exam(request, course_id):
    snapshot = store.get_course_with_chapters(course_id, request.user)

    try:
        questions = generate_exam(snapshot)
    except FinalExamError as exc:
        return _error_response(exc)

    eligibility = check_eligibility(snapshot)
    if not eligibility.eligible:
        logger.warning(
            "Final exam refused for user %s course %s: %s",
            request.user.pk, course_id, eligibility.code
        )
        return Response(eligibility.to_dict(), status=status.HTTP_403_FORBIDDEN)

    return Response({
        "course_id": course_id,
        "question_count": len(questions),
        "questions": [q.public_dict() for q in questions],
    })


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def submit_final_exam(request, course_id):
    serializer = FinalExamSubmissionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    snapshot = store.get_course_with_chapters(course_id, request.user)

    try:
        bank = {q.id: q for q in generate_exam(snapshot)}
    except FinalExamError as exc:
        return _error_response(exc)

    eligibility = check_eligibility(snapshot)
    if not eligibility.eligible:
        logger.warning(
            "Final exam submission refused for user %s course %s: %s",
            request.user.pk, course_id, eligibility.code
        )
        return Response(eligibility.to_dict(), status=status.HTTP_403_FORBIDDEN)

    question_ids = serializer.validated_data["question_ids"]
    answers = serializer.validated_data["answers"]

    if set(question_ids) != set(bank):
        return Response(
            {"detail": "Submitted questions do not match the final exam."},
            status=status.HTTP_400_BAD_REQUEST
        )

    questions = [bank[qid] for qid in question_ids]

    try:
        result = score_attempt(answers, [q.correct_answer for q in questions])
    except InvalidAnswerSetError as exc:
        return _error_response(exc)

    attempt_id = store.save_exam_attempt(
        request.user, course_id, questions, answers, result
    )

    certificate = CourseCertificate.objects.filter(
        user=request.user,
        course_id=course_id
    ).first()

    return Response(
        {
            "attempt_id": attempt_id,
            "result": result.to_dict(),
            "certificate_id": certificate.certificate_id if certificate else None,
        },
        status=status.HTTP_201_CREATED
    )


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def final_exam_best_result(request, course_id):
    result = store.get_best_result(request.user, course_id)
    return Response({"result": result.to_dict() if result else None})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def final_exam_history(request, course_id):
    attempts = store.get_exam_attempts(request.user, course_id)
    return Response(FinalExamAttemptSerializer(attempts, many=True).data)


# -------------------------
# Instructor
# -------------------------
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def verify_assignments(request, course_id):
    course = get_object_or_404(Course, pk=course_id)

    if not is_course_instructor(request.user, course):
        return Response(
            {"detail": "You are not allowed to verify assignments for this course."},
            status=status.HTTP_403_FORBIDDEN
        )

    count = store.verify_submitted_assignments(course)

    return Response({
        "success": True,
        "message": f"{count} assignments verified successfully!",
        "verified_count": count,
    })
