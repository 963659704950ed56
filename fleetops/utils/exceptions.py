import enum
from fastapi import HTTPException, status


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES: machine-readable constants for frontend switch/case
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode(str, enum.Enum):
    VALIDATION_ERROR        = "VALIDATION_ERROR"
    BAD_REQUEST             = "BAD_REQUEST"
    UPLOAD_FAILED           = "UPLOAD_FAILED"
    NOT_FOUND               = "NOT_FOUND"
    METHOD_NOT_ALLOWED      = "METHOD_NOT_ALLOWED"
    CONFLICT                = "CONFLICT"
    DUPLICATE_ENTRY         = "DUPLICATE_ENTRY"
    INTERNAL_SERVER_ERROR   = "INTERNAL_SERVER_ERROR"


# Every ErrorCode has exactly one HTTP status.
STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR:      status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.BAD_REQUEST:           status.HTTP_400_BAD_REQUEST,
    ErrorCode.UPLOAD_FAILED:         status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND:             status.HTTP_404_NOT_FOUND,
    ErrorCode.METHOD_NOT_ALLOWED:    status.HTTP_405_METHOD_NOT_ALLOWED,
    ErrorCode.CONFLICT:              status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_ENTRY:       status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(code: ErrorCode) -> int:
    return STATUS_BY_CODE[code]


def code_for(status_code: int) -> ErrorCode:
    """Reverse lookup used for framework-raised HTTP errors (unknown route, wrong verb)."""
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorCode.NOT_FOUND
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return ErrorCode.METHOD_NOT_ALLOWED
    if status_code == status.HTTP_409_CONFLICT:
        return ErrorCode.CONFLICT
    if status_code == status.HTTP_422_UNPROCESSABLE_ENTITY:
        return ErrorCode.VALIDATION_ERROR
    if 400 <= status_code < 500:
        return ErrorCode.BAD_REQUEST
    return ErrorCode.INTERNAL_SERVER_ERROR


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(HTTPException):
    """
    Base exception for all application-level errors.
    The HTTP status is derived from the error code, never passed separately.
    """
    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: list | None = None,
        field: str | None = None,
    ):
        self.error_code = error_code
        self.message = message
        super().__init__(status_code=status_for(error_code), detail={
            "message": message,
            "error": {
                "code": error_code.value,
                "details": details,
                "field": field,
            }
        })


# ═══════════════════════════════════════════════════════════════════════════════
# CONCRETE EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class NotFoundException(AppException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(ErrorCode.NOT_FOUND, message)


class ConflictException(AppException):
    def __init__(self, message: str):
        super().__init__(ErrorCode.CONFLICT, message)


class DuplicateEntryException(AppException):
    def __init__(self, message: str = "Record already exists", field: str | None = None):
        super().__init__(ErrorCode.DUPLICATE_ENTRY, message, field=field)


class BadRequestException(AppException):
    def __init__(self, message: str, details: list | None = None):
        super().__init__(ErrorCode.BAD_REQUEST, message, details=details)


class UploadFailedException(AppException):
    def __init__(self, message: str = "Failed to upload vehicle image"):
        super().__init__(ErrorCode.UPLOAD_FAILED, message, field="imageFile")


class InternalServerException(AppException):
    def __init__(self, message: str = "An unexpected error occurred. Please try again later."):
        super().__init__(ErrorCode.INTERNAL_SERVER_ERROR, message)
