from prompt_admin.logging.logging_config import logger, setup_logging
from prompt_admin.logging.exceptions import (
    AppException,
    AuthError,
    RepositoryError,
    NotFoundSignal,
    ValidationError
)

__all__ = [
    "logger",
    "setup_logging",
    "AppException",
    "AuthError",
    "RepositoryError",
    "NotFoundSignal",
    "ValidationError"
]
