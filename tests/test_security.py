"""비밀번호/세션 토큰 유틸리티 테스트"""

import time
from unittest.mock import patch

import pytest

from app.core.config import settings
from app.core.security import (
    _verify_password_sync,
    dummy_hash,
    hash_password,
    hash_token,
    new_session_token,
    session_expiry,
    verify_password,
)


def _cost(password_hash: bytes | str) -> int:
    if isinstance(password_hash, str):
        password_hash = password_hash.encode("utf-8")
    return int(password_hash.split(b"$")[2])


class TestPasswordHashing:
    """bcrypt 해시/검증 테스트"""

    @pytest.mark.asyncio
    async def test_hash_and_verify(self):
        password_hash = await hash_password("secret-pw")

        assert await verify_password("secret-pw", password_hash)
        assert not await verify_password("secret-pX", password_hash)

    @pytest.mark.asyncio
    async def test_hash_uses_configured_rounds(self):
        password_hash = await hash_password("secret-pw")

        assert _cost(password_hash) == settings.bcrypt_rounds

    def test_dummy_hash_matches_configured_rounds(self):
        """알 수 없는 이메일의 비교 비용이 실제 해시와 같아야 함"""
        assert _cost(dummy_hash(settings.bcrypt_rounds)) == settings.bcrypt_rounds

    @pytest.mark.parametrize("rounds", [4, 5])
    def test_dummy_hash_follows_rounds(self, rounds):
        assert _cost(dummy_hash(rounds)) == rounds

    def test_missing_hash_checks_dummy_at_same_cost(self):
        with patch("app.core.security.dummy_hash", wraps=dummy_hash) as mock_dummy:
            result = _verify_password_sync("anything", None, 5)

        assert result is False
        mock_dummy.assert_called_once_with(5)

    @pytest.mark.asyncio
    async def test_unknown_email_uses_configured_rounds(self):
        with patch("app.core.security.dummy_hash", wraps=dummy_hash) as mock_dummy:
            assert not await verify_password("anything", None)

        mock_dummy.assert_called_once_with(settings.bcrypt_rounds)

    def test_malformed_hash_is_rejected(self):
        assert _verify_password_sync("pw", "not-a-bcrypt-hash", 4) is False

    def test_overlong_password_is_rejected(self):
        assert _verify_password_sync("x" * 73, None, 4) is False


class TestSessionTokens:
    """세션 토큰 테스트"""

    def test_tokens_are_unique(self):
        assert new_session_token() != new_session_token()

    def test_hash_is_stable_and_not_plaintext(self):
        token = new_session_token()

        assert hash_token(token) == hash_token(token)
        assert hash_token(token) != token
        assert len(hash_token(token)) == 64

    def test_expiry_is_ttl_after_now(self):
        now = time.time()

        assert session_expiry(now) == int(now) + settings.session_ttl_days * 24 * 60 * 60
