from typing import Optional


class AppException(Exception):
    status_code: int = 500

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthError(AppException):
    """Session retrieval or sign-in against the auth provider failed."""
    status_code = 401


class RepositoryError(AppException):
    """Backend or transport failure while reading or writing the prompt record."""
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None, details: dict = None):
        self.code = code
        super().__init__(message, details)


class NotFoundSignal(RepositoryError):
    """The backend explicitly reported that no record exists."""
    status_code = 404

    def __init__(self, message: str = "No record found", details: dict = None):
        super().__init__(message, code="not_found", details=details)


class ValidationError(AppException):
    status_code = 400
