"""Error taxonomy shared by the services and the HTTP layer."""
from typing import Dict, Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


class TaskMasterError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        self.message = message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(TaskMasterError):
    """Missing or empty required input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class EmailConflict(TaskMasterError):
    """Registration with an email that already exists."""

    status_code = 400
    code = "EMAIL_CONFLICT"


class InvalidCredentials(TaskMasterError):
    """Login failure. Unknown email and wrong password are not distinguished."""

    status_code = 401
    code = "INVALID_CREDENTIALS"


class Unauthenticated(TaskMasterError):
    """Missing, malformed, invalid or expired bearer token."""

    status_code = 401
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFound(TaskMasterError):
    """Task absent or owned by someone else."""

    status_code = 404
    code = "NOT_FOUND"


class InternalError(TaskMasterError):
    """Unexpected storage or infrastructure failure."""

    status_code = 500
    code = "INTERNAL_ERROR"
