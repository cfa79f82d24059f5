"""
structlog 기반 로깅 설정

- 개발 환경: 컬러풀한 콘솔 출력
- 프로덕션 환경: JSON 형식 출력
- 컨텍스트 자동 주입: request_id, user_id
"""

import logging
import re
import sys

import structlog

from app.core.config import settings
from app.core.context import get_request_id, get_user_id

SENSITIVE_PATTERNS = [
    (re.compile(r"(token=)[^&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(Bearer\s+)[^\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(api[_-]?key=)[^&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(password=)[^&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(session_token=)[^;&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}"), "***"),
]

SENSITIVE_KEYS = {"password", "password_hash", "session_token", "token"}


def _mask_sensitive_data(value: str) -> str:
    """민감한 정보 마스킹"""
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def add_context_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """request_id와 user_id를 로그에 자동 주입"""
    request_id = get_request_id()
    user_id = get_user_id()

    if request_id:
        event_dict["request_id"] = request_id
    if user_id is not None:
        event_dict["user_id"] = user_id

    return event_dict


def mask_sensitive_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """민감한 키는 항상, 문자열 패턴은 프로덕션에서 마스킹"""
    for key in SENSITIVE_KEYS & event_dict.keys():
        event_dict[key] = "***"

    if not settings.is_production:
        return event_dict

    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _mask_sensitive_data(value)

    return event_dict


QUIET_LOGGERS = (
    "httpcore",
    "httpx",
    "aiosqlite",
    "asyncpg",
    "langfuse",
    "langchain",
    "google_genai",
    "openai",
    "anyio",
    "multipart",
)


def _shared_processors() -> list:
    """structlog 로거와 표준 logging 레코드가 함께 거치는 전처리 단계"""
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        add_context_processor,
        mask_sensitive_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer():
    if settings.is_production:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def setup_logging(level: str | None = None) -> None:
    """structlog 설정 초기화

    앱 코드는 logger.info("... key=%s", value) 형태의 위치 인자를 쓰므로
    PositionalArgumentsFormatter로 먼저 메시지를 완성한다.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    pre_chain = _shared_processors()
    if settings.is_production:
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # uvicorn 핸들러를 비워 루트 핸들러 하나로만 출력
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).handlers.clear()

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog 로거 반환"""
    return structlog.get_logger(name)
