from rest_framework import serializers


class FinalExamSubmissionSerializer(serializers.Serializer):
    question_ids = serializers.ListField(
        child=serializers.CharField(),
        allow_empty=False,
    )
    answers = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
    )

    def validate_question_ids(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError("Duplicate question ids.")
        return value


class FinalExamAttemptSerializer(serializers.Serializer):
    """Read-only view of an ExamAttemptSnapshot."""

    id = serializers.IntegerField()
    score = serializers.IntegerField()
    passed = serializers.BooleanField()
    grade = serializers.CharField()
    certificate_eligible = serializers.BooleanField()
    completed_at = serializers.DateTimeField()
    question_count = serializers.SerializerMethodField()

    def get_question_count(self, attempt):
        return len(attempt.questions)
