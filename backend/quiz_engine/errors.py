"""Domain errors raised by the quiz engine.

Each error carries the HTTP status the controllers translate it to.
"""


class QuizEngineError(Exception):
    status_code = 400


class QuizNotAvailable(QuizEngineError):
    """Quiz missing, unpublished, or outside the student's enrollments."""
    status_code = 404


class AttemptNotFound(QuizEngineError):
    status_code = 404


class AttemptQuotaExceeded(QuizEngineError):
    """The student has used every attempt the quiz allows."""
    status_code = 409

    def __init__(self, quiz_id: int, max_attempts: int):
        self.quiz_id = quiz_id
        self.max_attempts = max_attempts
        super().__init__(f"maximum of {max_attempts} attempts reached for quiz {quiz_id}")


class AttemptAlreadySubmitted(QuizEngineError):
    status_code = 409


class AttemptInProgress(QuizEngineError):
    """Results were requested for an attempt that is still open."""
    status_code = 409


class AttemptConflict(QuizEngineError):
    """No free attempt number could be allocated after retrying."""
    status_code = 409


class UnknownQuestion(QuizEngineError):
    status_code = 400


class QuestionLoadFailure(QuizEngineError):
    """Questions could not be read; no attempt is started."""
    status_code = 503


class SubmissionFailure(QuizEngineError):
    """Persisting a submission failed; buffered answers are kept for retry."""
    status_code = 503


class NotificationFailure(QuizEngineError):
    """Raised by notifiers; logged by the caller and never surfaced."""
    status_code = 500


class QuizImportError(ValueError):
    """A quiz definition failed validation during import."""
