import json
import time

from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    UnauthorizedError,
    UnavailableError,
    ValidationError,
)
from app.core.logging import get_logger
from app.core.security import (
    MAX_PASSWORD_BYTES,
    hash_password,
    hash_token,
    new_session_token,
    session_expiry,
    verify_password,
)
from app.domain.account.schemas import Account, ProfileUpdate
from app.infra.db import Database, StorageError
from app.infra.storage.avatars import AvatarStorage, is_image_content_type

logger = get_logger(__name__)

ACCOUNT_COLUMNS = (
    "id",
    "email",
    "name",
    "avatar",
    "bio",
    "theme",
    "target_role",
    "experience_level",
    "linkedin_url",
    "github_url",
    "preferences",
    "created_at",
)

SELECT_ACCOUNT = f"SELECT {', '.join(ACCOUNT_COLUMNS)} FROM users WHERE id = ?"

SELECT_SESSION_ACCOUNT = (
    f"SELECT {', '.join('u.' + c for c in ACCOUNT_COLUMNS)} "
    "FROM sessions s JOIN users u ON u.id = s.user_id "
    "WHERE s.token_hash = ? AND s.expires_at > ?"
)

INVALID_CREDENTIALS = "이메일 또는 비밀번호가 올바르지 않습니다"


class AccountService:
    """회원가입, 로그인, 세션, 프로필 수정

    모든 저장소 오류는 도메인 예외(Conflict/Unauthorized/Unavailable)로 바꿔서 던진다.
    """

    def __init__(self, db: Database, avatar_storage: AvatarStorage | None = None):
        self.db = db
        self.avatar_storage = avatar_storage or AvatarStorage(settings.avatar_dir)

    async def register(self, email: str, password: str, name: str | None) -> tuple[Account, str]:
        """계정 생성 후 (계정, 세션 토큰) 반환"""
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError(detail="email과 password는 필수입니다")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(detail=f"password는 {MAX_PASSWORD_BYTES}바이트 이하여야 합니다")

        password_hash = await hash_password(password)
        try:
            result = await self.db.run(
                "INSERT INTO users (email, password, name) VALUES (?, ?, ?)",
                (email, password_hash, name),
            )
        except StorageError as e:
            if e.is_integrity_error:
                logger.info("중복 이메일 가입 시도")
                raise ConflictError() from e
            logger.error("회원가입 저장 실패 error=%s", e)
            raise UnavailableError(detail=str(e)) from e

        account = await self.get_account(result.inserted_id)
        token = await self._create_session(account.id)
        logger.info("회원가입 완료 account_id=%d", account.id)
        return account, token

    async def authenticate(self, email: str, password: str) -> tuple[Account, str]:
        """자격 증명 확인 후 (계정, 세션 토큰) 반환"""
        try:
            row = await self.db.get(
                "SELECT id, password FROM users WHERE email = ?",
                ((email or "").strip(),),
            )
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e

        stored_hash = row["password"] if row else None
        if not await verify_password(password or "", stored_hash) or row is None:
            logger.info("로그인 실패")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        account = await self.get_account(row["id"])
        token = await self._create_session(account.id)
        logger.info("로그인 성공 account_id=%d", account.id)
        return account, token

    async def current_account(self, session_token: str | None) -> Account:
        """세션 토큰으로 계정 조회 - 매 요청마다 검증"""
        if not session_token:
            raise UnauthorizedError()
        try:
            row = await self.db.get(
                SELECT_SESSION_ACCOUNT,
                (hash_token(session_token), int(time.time())),
            )
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e
        if row is None:
            raise UnauthorizedError()
        return Account.model_validate(row)

    async def logout(self, session_token: str | None) -> None:
        """세션 삭제. 없는 세션이어도 성공"""
        if not session_token:
            return
        try:
            await self.db.run(
                "DELETE FROM sessions WHERE token_hash = ?",
                (hash_token(session_token),),
            )
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e

    async def get_account(self, account_id: int) -> Account:
        try:
            row = await self.db.get(SELECT_ACCOUNT, (account_id,))
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e
        if row is None:
            raise UnauthorizedError()
        return Account.model_validate(row)

    async def update_profile(self, account_id: int, update: ProfileUpdate) -> None:
        """전달된 필드만 단일 UPDATE로 변경"""
        data = update.model_dump(exclude_unset=True)
        if not data:
            return

        if "theme" in data and data["theme"] is None:
            data["theme"] = "light"
        if "preferences" in data and data["preferences"] is not None:
            data["preferences"] = json.dumps(data["preferences"], ensure_ascii=False)

        assignments = ", ".join(f"{column} = ?" for column in data)
        try:
            await self.db.run(
                f"UPDATE users SET {assignments} WHERE id = ?",
                (*data.values(), account_id),
            )
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e
        logger.info("프로필 수정 account_id=%d fields=%s", account_id, ",".join(data))

    async def set_avatar(
        self,
        account_id: int,
        content: bytes,
        original_filename: str | None,
        content_type: str | None,
    ) -> str:
        """이미지 저장 후 계정에 경로 연결, 경로 반환"""
        if not is_image_content_type(content_type):
            raise ValidationError(message="이미지 파일만 업로드할 수 있습니다", detail=content_type)
        if not content:
            raise ValidationError(detail="빈 파일입니다")
        if len(content) > settings.max_avatar_bytes:
            raise ValidationError(detail=f"최대 {settings.max_avatar_bytes}바이트까지 업로드할 수 있습니다")

        previous = await self.get_account(account_id)
        reference = await self.avatar_storage.save(content, content_type)
        try:
            await self.db.run("UPDATE users SET avatar = ? WHERE id = ?", (reference, account_id))
        except StorageError as e:
            await self.avatar_storage.delete(reference)
            raise UnavailableError(detail=str(e)) from e

        if previous.avatar and previous.avatar != reference:
            try:
                await self.avatar_storage.delete(previous.avatar)
            except OSError as e:
                logger.warning("이전 아바타 삭제 실패 avatar=%s error=%s", previous.avatar, e)

        logger.info("아바타 변경 account_id=%d original=%s", account_id, original_filename)
        return reference

    async def _create_session(self, account_id: int) -> str:
        token = new_session_token()
        now = time.time()
        try:
            # 다시 로그인하지 않는 계정의 세션도 남지 않도록 만료된 세션 전체 정리
            await self.db.run("DELETE FROM sessions WHERE expires_at <= ?", (int(now),))
            await self.db.run(
                "INSERT INTO sessions (token_hash, user_id, expires_at) VALUES (?, ?, ?)",
                (hash_token(token), account_id, session_expiry(now)),
            )
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e
        return token
