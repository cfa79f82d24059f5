"""
HTTP 요청 로깅 미들웨어

- 요청 시작 시 request_id 생성
- 요청/응답 메타데이터 자동 로깅
- X-Request-ID 응답 헤더 추가
- 정적 업로드 파일 요청은 로깅 제외
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.context import clear_context, set_request_id
from app.core.logging import get_logger

logger = get_logger(__name__)

SKIP_PATHS = {"/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico"}
SKIP_PREFIXES = ("/uploads/",)


def _should_skip(path: str) -> bool:
    return path in SKIP_PATHS or path.startswith(SKIP_PREFIXES)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 요청 로깅 및 request_id 관리 미들웨어"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if _should_skip(request.url.path):
            return await call_next(request)

        request_id = set_request_id(request.headers.get("X-Request-ID"))
        start_time = time.perf_counter()

        logger.info(
            "요청 시작",
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "요청 실패",
                method=request.method,
                path=request.url.path,
                error=type(e).__name__,
                duration_ms=self._elapsed_ms(start_time),
            )
            raise
        else:
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "요청 완료",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=self._elapsed_ms(start_time),
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)

    def _get_client_ip(self, request: Request) -> str:
        """클라이언트 IP 추출"""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
