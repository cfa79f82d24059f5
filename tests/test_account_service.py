"""AccountService 테스트"""

import pytest

from app.core.exceptions import (
    ConflictError,
    UnauthorizedError,
    UnavailableError,
    ValidationError,
)
from app.domain.account.schemas import Preferences, ProfileUpdate
from app.infra.db import StorageError


class TestRegister:
    """회원가입 테스트"""

    @pytest.mark.asyncio
    async def test_register_returns_account_and_token(self, account_service):
        account, token = await account_service.register("alice@example.com", "pw1", "Alice")

        assert account.email == "alice@example.com"
        assert account.name == "Alice"
        assert account.theme == "light"
        assert token
        assert "password" not in account.model_dump()

    @pytest.mark.asyncio
    async def test_password_is_hashed(self, account_service, db):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        row = await db.get("SELECT password FROM users WHERE id = ?", (account.id,))

        assert row["password"] != "pw1"
        assert row["password"].startswith("$2")

    @pytest.mark.parametrize(
        "password, name",
        [("pw1", "Alice"), ("other", "Alice"), ("pw1", "Bob"), ("zzz", None)],
    )
    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, account_service, password, name):
        """비밀번호/이름이 달라도 같은 이메일은 Conflict"""
        await account_service.register("alice@example.com", "pw1", "Alice")

        with pytest.raises(ConflictError):
            await account_service.register("alice@example.com", password, name)

    @pytest.mark.parametrize(
        "email, password",
        [("", "pw"), ("   ", "pw"), ("alice@example.com", ""), (None, "pw")],
    )
    @pytest.mark.asyncio
    async def test_missing_fields_are_invalid(self, account_service, email, password):
        with pytest.raises(ValidationError):
            await account_service.register(email, password, "Alice")

    @pytest.mark.asyncio
    async def test_overlong_password_is_invalid(self, account_service):
        with pytest.raises(ValidationError):
            await account_service.register("alice@example.com", "x" * 73, "Alice")

    @pytest.mark.asyncio
    async def test_storage_failure_is_unavailable(self, account_service, db, monkeypatch):
        async def broken_run(query, params=()):
            raise StorageError("connection lost")

        monkeypatch.setattr(db, "run", broken_run)

        with pytest.raises(UnavailableError):
            await account_service.register("alice@example.com", "pw1", "Alice")


class TestAuthenticate:
    """로그인 테스트"""

    @pytest.mark.asyncio
    async def test_original_password_succeeds(self, account_service):
        registered, _ = await account_service.register("alice@example.com", "secret-pw", "Alice")

        account, token = await account_service.authenticate("alice@example.com", "secret-pw")

        assert account.id == registered.id
        assert token

    @pytest.mark.parametrize(
        "altered",
        ["Secret-pw", "secret-pX", "secret_pw", "secret-p", "secret-pww", "xsecret-pw"],
    )
    @pytest.mark.asyncio
    async def test_altered_password_fails(self, account_service, altered):
        await account_service.register("alice@example.com", "secret-pw", "Alice")

        with pytest.raises(UnauthorizedError):
            await account_service.authenticate("alice@example.com", altered)

    @pytest.mark.asyncio
    async def test_unknown_email_fails(self, account_service):
        with pytest.raises(UnauthorizedError):
            await account_service.authenticate("ghost@example.com", "pw")

    @pytest.mark.asyncio
    async def test_email_is_case_sensitive(self, account_service):
        await account_service.register("alice@example.com", "pw1", "Alice")

        with pytest.raises(UnauthorizedError):
            await account_service.authenticate("Alice@example.com", "pw1")


class TestSession:
    """세션 발급/검증/로그아웃 테스트"""

    @pytest.mark.asyncio
    async def test_current_account_from_token(self, account_service):
        registered, token = await account_service.register("alice@example.com", "pw1", "Alice")

        account = await account_service.current_account(token)

        assert account.id == registered.id

    @pytest.mark.parametrize("token", [None, "", "not-a-real-token"])
    @pytest.mark.asyncio
    async def test_invalid_token_is_unauthorized(self, account_service, token):
        with pytest.raises(UnauthorizedError):
            await account_service.current_account(token)

    @pytest.mark.asyncio
    async def test_token_is_stored_hashed(self, account_service, db):
        _, token = await account_service.register("alice@example.com", "pw1", "Alice")

        rows = await db.all("SELECT token_hash FROM sessions")

        assert len(rows) == 1
        assert rows[0]["token_hash"] != token

    @pytest.mark.asyncio
    async def test_expired_session_is_unauthorized(self, account_service, db):
        _, token = await account_service.register("alice@example.com", "pw1", "Alice")
        await db.run("UPDATE sessions SET expires_at = ?", (0,))

        with pytest.raises(UnauthorizedError):
            await account_service.current_account(token)

    @pytest.mark.asyncio
    async def test_login_purges_expired_sessions_of_all_accounts(self, account_service, db):
        alice, _ = await account_service.register("alice@example.com", "pw1", "Alice")
        await db.run("UPDATE sessions SET expires_at = ? WHERE user_id = ?", (0, alice.id))

        await account_service.register("bob@example.com", "pw2", "Bob")
        rows = await db.all("SELECT user_id FROM sessions")

        assert alice.id not in [row["user_id"] for row in rows]
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_logout_invalidates_and_is_idempotent(self, account_service):
        _, token = await account_service.register("alice@example.com", "pw1", "Alice")

        await account_service.logout(token)
        await account_service.logout(token)
        await account_service.logout(None)

        with pytest.raises(UnauthorizedError):
            await account_service.current_account(token)

    @pytest.mark.asyncio
    async def test_logout_keeps_other_sessions(self, account_service):
        _, first = await account_service.register("alice@example.com", "pw1", "Alice")
        _, second = await account_service.authenticate("alice@example.com", "pw1")

        await account_service.logout(first)

        account = await account_service.current_account(second)
        assert account.email == "alice@example.com"


class TestUpdateProfile:
    """프로필 부분 수정 테스트"""

    @pytest.mark.asyncio
    async def test_only_given_fields_change(self, account_service):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")
        await account_service.update_profile(account.id, ProfileUpdate(bio="Backend dev", theme="dark"))

        await account_service.update_profile(account.id, ProfileUpdate(target_role="SRE"))
        updated = await account_service.get_account(account.id)

        assert updated.name == "Alice"
        assert updated.bio == "Backend dev"
        assert updated.theme == "dark"
        assert updated.target_role == "SRE"
        assert updated.linkedin_url is None

    @pytest.mark.asyncio
    async def test_preferences_round_trip(self, account_service):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")
        preferences = Preferences(
            include_projects=False,
            emphasized_keywords=["Python", "Kubernetes"],
            preferred_sections=["Experience"],
            summary_tone="concise",
        )

        await account_service.update_profile(account.id, ProfileUpdate(preferences=preferences))
        updated = await account_service.get_account(account.id)

        assert updated.preferences == preferences

    @pytest.mark.asyncio
    async def test_empty_update_is_noop(self, account_service):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        await account_service.update_profile(account.id, ProfileUpdate())
        updated = await account_service.get_account(account.id)

        assert updated.name == "Alice"

    @pytest.mark.asyncio
    async def test_defaults_without_prior_values(self, account_service):
        account, _ = await account_service.register("alice@example.com", "pw1", None)

        assert account.bio is None
        assert account.avatar is None
        assert account.theme == "light"
        assert account.preferences == Preferences()


class TestSetAvatar:
    """아바타 업로드 테스트"""

    @pytest.mark.asyncio
    async def test_stores_image_and_updates_account(self, account_service, avatar_storage):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        reference = await account_service.set_avatar(account.id, b"\x89PNG....", "me.png", "image/png")
        updated = await account_service.get_account(account.id)

        assert reference.startswith("/uploads/avatars/")
        assert reference.endswith(".png")
        assert updated.avatar == reference
        assert (avatar_storage.directory / reference.rsplit("/", 1)[-1]).read_bytes() == b"\x89PNG...."

    @pytest.mark.asyncio
    async def test_same_filename_never_collides(self, account_service):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        first = await account_service.set_avatar(account.id, b"a", "me.png", "image/png")
        second = await account_service.set_avatar(account.id, b"b", "me.png", "image/png")

        assert first != second

    @pytest.mark.asyncio
    async def test_replacing_avatar_removes_previous_file(self, account_service, avatar_storage):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        first = await account_service.set_avatar(account.id, b"a", "me.png", "image/png")
        await account_service.set_avatar(account.id, b"b", "me.png", "image/png")

        assert not (avatar_storage.directory / first.rsplit("/", 1)[-1]).exists()

    @pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "image/svg+xml", None, ""])
    @pytest.mark.asyncio
    async def test_non_image_is_rejected(self, account_service, avatar_storage, content_type):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        with pytest.raises(ValidationError):
            await account_service.set_avatar(account.id, b"data", "cv.pdf", content_type)

        assert not avatar_storage.directory.exists()

    @pytest.mark.asyncio
    async def test_empty_file_is_rejected(self, account_service):
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        with pytest.raises(ValidationError):
            await account_service.set_avatar(account.id, b"", "me.png", "image/png")

    @pytest.mark.asyncio
    async def test_suffix_ignores_client_filename(self, account_service, avatar_storage):
        """파일명이 .svg여도 선언된 형식의 확장자로 저장"""
        account, _ = await account_service.register("alice@example.com", "pw1", "Alice")

        reference = await account_service.set_avatar(account.id, b"<svg/>", "x.svg", "image/png")

        assert reference.endswith(".png")
        assert not list(avatar_storage.directory.glob("*.svg"))
