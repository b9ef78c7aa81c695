"""
Domain errors raised by the jobboard data layer.

Each error carries the HTTP status an API layer would answer with, so callers
can translate them without a lookup table.
"""


class JobBoardError(Exception):
    """Base class for recoverable domain errors."""

    status = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class BadRequestError(JobBoardError):
    """Raised for malformed ids, invalid payloads or constraint violations."""

    status = 400

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class NotFoundError(JobBoardError):
    """Raised when an operation targets an id that does not exist."""

    status = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)
