from .course import Course
from .chapter import Chapter, ChapterProgress
from .quiz import Quiz, QuizAttempt
from .assignment import Assignment, AssignmentSubmission

from .enrollment import CourseEnrollment
from .exam import FinalExamAttempt
from .certificate import CourseCertificate
