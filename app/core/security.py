"""비밀번호 해시와 세션 토큰 유틸리티"""

import functools
import hashlib
import secrets
import time

import bcrypt
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings

SESSION_TOKEN_BYTES = 32

# bcrypt는 72바이트까지만 사용
MAX_PASSWORD_BYTES = 72


@functools.cache
def dummy_hash(rounds: int) -> bytes:
    """존재하지 않는 이메일 로그인 시 비교할 해시. 실제 해시와 같은 비용으로 생성"""
    return bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=rounds))


def _hash_password_sync(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _verify_password_sync(password: str, password_hash: str | None, rounds: int) -> bool:
    candidate = password.encode("utf-8")
    try:
        if not password_hash or len(candidate) > MAX_PASSWORD_BYTES:
            bcrypt.checkpw(candidate[:MAX_PASSWORD_BYTES], dummy_hash(rounds))
            return False
        return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))
    except ValueError:
        return False


async def hash_password(password: str) -> str:
    """솔트를 포함한 bcrypt 해시 생성 (스레드풀에서 실행)"""
    return await run_in_threadpool(_hash_password_sync, password, settings.bcrypt_rounds)


async def verify_password(password: str, password_hash: str | None) -> bool:
    """bcrypt 비교. 해시가 없으면 더미 해시로 비교해 타이밍 차이를 줄임"""
    return await run_in_threadpool(
        _verify_password_sync, password, password_hash, settings.bcrypt_rounds
    )


def new_session_token() -> str:
    """쿠키에 담길 불투명 세션 토큰 생성"""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """저장소에는 토큰 원문 대신 sha256 해시만 저장"""
    return hashlib.sha256(token.encode()).hexdigest()


def session_expiry(now: float | None = None) -> int:
    """세션 만료 시각 (epoch 초)"""
    if now is None:
        now = time.time()
    return int(now) + settings.session_ttl_days * 24 * 60 * 60
