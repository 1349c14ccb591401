"""Custom exception classes raised by the service layer.

Each exception carries the HTTP status code a web layer should answer with.
"""


class ScholarisException(Exception):
    """Base exception for all Scholaris-specific errors."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(ScholarisException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", 404)


class ConflictException(ScholarisException):
    """Resource conflict exception."""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, 409)


class ValidationException(ScholarisException):
    """Validation error exception with field-level errors."""

    def __init__(self, errors: list[dict] | str):
        if isinstance(errors, str):
            errors = [{"field": "general", "message": errors}]
        super().__init__("Validation failed", 422)
        self.errors = errors


class TenantContextError(ScholarisException):
    """Institution context not set error."""

    def __init__(self, message: str = "Institution context is required"):
        super().__init__(message, 400)
