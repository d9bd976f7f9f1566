class FinalExamError(Exception):
    """Base class for final exam errors that indicate a caller/data problem."""


class CourseNotFoundError(FinalExamError):
    def __init__(self, course_id=None):
        self.course_id = course_id
        super().__init__("Course not found")


class FinalExamNotEnabledError(FinalExamError):
    def __init__(self, course_id=None):
        self.course_id = course_id
        super().__init__(
            "The instructor has not enabled the final exam for this course yet"
        )


class NoQuestionsError(FinalExamError):
    def __init__(self, course_id=None):
        self.course_id = course_id
        super().__init__("No questions have been created for the final exam")


class InvalidAnswerSetError(FinalExamError, ValueError):
    pass


class InvalidQuestionBankError(FinalExamError, ValueError):
    """The stored question bank does not have the expected shape."""
