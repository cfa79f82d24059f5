from enum import Enum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    CONFLICT = "CONFLICT"
    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    UNAVAILABLE = "UNAVAILABLE"
    LLM_ERROR = "LLM_ERROR"
    LLM_TIMEOUT = "LLM_TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CustomException(Exception):
    def __init__(
        self,
        status_code: int,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail
        super().__init__(message)


class ConflictError(CustomException):
    def __init__(self, message: str = "이미 존재하는 사용자이거나 잘못된 데이터입니다", detail: str | None = None):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.CONFLICT,
            message=message,
            detail=detail,
        )


class ValidationError(CustomException):
    def __init__(self, detail: str | None = None, message: str = "입력값이 올바르지 않습니다"):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.INVALID_INPUT,
            message=message,
            detail=detail,
        )


class UnauthorizedError(CustomException):
    def __init__(self, message: str = "인증이 필요합니다", detail: str | None = None):
        super().__init__(
            status_code=401,
            error_code=ErrorCode.UNAUTHORIZED,
            message=message,
            detail=detail,
        )


class UnavailableError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=503,
            error_code=ErrorCode.UNAVAILABLE,
            message="일시적으로 요청을 처리할 수 없습니다",
            detail=detail,
        )


class LLMError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.LLM_ERROR,
            message="LLM 호출에 실패했습니다",
            detail=detail,
        )


class LLMTimeoutError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=504,
            error_code=ErrorCode.LLM_TIMEOUT,
            message="LLM 응답 시간이 초과되었습니다",
            detail=detail,
        )


def _error_content(error_code: ErrorCode | str, message: str, detail: str | None) -> dict:
    content = {
        "error": message,
        "error_code": error_code,
    }
    if detail and not settings.is_production:
        content["detail"] = detail
    return content


def register_exception_handlers(app):
    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_content(exc.error_code, exc.message, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(loc) for loc in err["loc"][1:]) for err in exc.errors()]
        return JSONResponse(
            status_code=400,
            content=_error_content(
                ErrorCode.INVALID_INPUT,
                "입력값이 올바르지 않습니다",
                f"fields={', '.join(f for f in fields if f)}",
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "처리되지 않은 예외",
            path=request.url.path,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=_error_content(ErrorCode.INTERNAL_ERROR, "서버 내부 오류가 발생했습니다", None),
        )
