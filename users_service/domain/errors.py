"""Типизированные ошибки аккаунтов; HTTP-слой выбирает статус по ErrorCode."""
from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_USER = "DUPLICATE_USER"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_MISSING = "TOKEN_MISSING"
    TOKEN_INVALID = "TOKEN_INVALID"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AccountError(Exception):
    """Base class for all account failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message: str = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailure(AccountError):
    code = ErrorCode.VALIDATION_ERROR
    default_message = "Invalid request"


class DuplicateFailure(AccountError):
    code = ErrorCode.DUPLICATE_USER
    default_message = "Email or username already exists"


class NotFoundFailure(AccountError):
    code = ErrorCode.USER_NOT_FOUND
    default_message = "User not found."


class CredentialMismatch(AccountError):
    code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class TokenMissing(AccountError):
    code = ErrorCode.TOKEN_MISSING
    default_message = "Access denied."


class TokenInvalid(AccountError):
    code = ErrorCode.TOKEN_INVALID
    default_message = "Invalid token."


class UnexpectedFailure(AccountError):
    code = ErrorCode.INTERNAL_ERROR
