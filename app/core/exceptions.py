"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class UnauthorizedException(AppException):
    """Unauthorized access exception."""

    def __init__(self, message: str = "Unauthorized"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Forbidden access exception."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class InternalServerException(AppException):
    """Unexpected failure in the database or a procedure contract."""

    def __init__(self, message: str = "Internal server error"):
        """Initialize with 500 status code."""
        super().__init__(message, status_code=500)


class ProcedureError(Exception):
    """
    Structured database error.

    Carries the SQLSTATE reported by PostgreSQL as an integer code where it is
    numeric (application guard codes, FK violations), and the server message.
    """

    def __init__(self, code: int | None, message: str):
        """Initialize with the server error code and message."""
        self.code = code
        self.message = message
        super().__init__(message)
