"""Error codes and exceptions shared by the store, auth and routers."""

from enum import Enum


class ErrorCode(Enum):
    VALIDATION_REFUSED = "VALIDATION_REFUSED"
    NOT_FOUND = "NOT_FOUND"
    AUTH_FAILED = "AUTH_FAILED"
    STORE_FAILURE = "STORE_FAILURE"


class LightwaveError(Exception):
    """Base error with a code and a user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_REFUSED
    message: str = "Request refused"

    def __init__(self, message: str | None = None) -> None:
        if message:
            self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationRefusal(LightwaveError):
    code = ErrorCode.VALIDATION_REFUSED
    message = "Validation refused"


class NotFound(LightwaveError):
    code = ErrorCode.NOT_FOUND
    message = "Not found"


class AuthFailure(LightwaveError):
    # Unknown user and wrong password share one message
    code = ErrorCode.AUTH_FAILED
    message = "Access denied."


class StoreFailure(LightwaveError):
    code = ErrorCode.STORE_FAILURE
    message = "Document store unavailable"
