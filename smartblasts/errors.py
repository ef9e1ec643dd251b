"""
Application errors.

Core and service functions raise these; the API layer turns them into JSON
responses with the status code each class carries.
"""


class SmartBlastsError(Exception):
    """Base error for anything the caller can be told about."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SmartBlastsError):
    """Raised when input is missing or malformed."""
    status_code = 400


class AuthenticationError(SmartBlastsError):
    """Raised for bad credentials or a missing/expired session."""
    status_code = 401


class PermissionDeniedError(SmartBlastsError):
    status_code = 403


class NotFoundError(SmartBlastsError):
    status_code = 404


class DuplicateError(SmartBlastsError):
    """Raised when a record with the same key already exists."""
    status_code = 409
