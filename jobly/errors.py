"""
Error hierarchy for Jobly.

Every error carries an HTTP-equivalent status so an outer layer can turn it
into a response or exit code without inspecting the message.
"""


class JoblyError(Exception):
    """Base error with a human-readable message and a status code."""

    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.message = message
        self.status = status


class BadRequestError(JoblyError):
    """Caller sent data that cannot be used (400)."""

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message, 400)


class NotFoundError(JoblyError):
    """Requested record does not exist (404)."""

    def __init__(self, message: str = "Not Found"):
        super().__init__(message, 404)


class EmptyUpdateError(BadRequestError):
    """Raised when a partial update carries no fields."""

    def __init__(self, message: str = "No data"):
        super().__init__(message)


class InvalidRangeError(JoblyError):
    """Raised when a numeric filter range has its bounds inverted."""

    def __init__(self, message: str):
        super().__init__(message, 400)
