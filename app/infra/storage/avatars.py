import uuid
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from app.core.logging import get_logger

logger = get_logger(__name__)

AVATAR_URL_PREFIX = "/uploads/avatars"

# 정적 마운트가 확장자로 Content-Type을 정하므로 스크립트를 담을 수 있는 형식(svg 등)은 받지 않는다
CONTENT_TYPE_SUFFIXES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/avif": ".avif",
}


def _normalize_content_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def is_image_content_type(content_type: str | None) -> bool:
    """허용된 래스터 이미지 형식인지 확인"""
    return _normalize_content_type(content_type) in CONTENT_TYPE_SUFFIXES


def build_avatar_filename(content_type: str | None) -> str:
    """랜덤 UUID 기반 파일명. 확장자는 클라이언트 파일명이 아니라 Content-Type에서 결정"""
    suffix = CONTENT_TYPE_SUFFIXES.get(_normalize_content_type(content_type))
    if suffix is None:
        raise ValueError(f"지원하지 않는 이미지 형식: {content_type}")
    return f"{uuid.uuid4().hex}{suffix}"


class AvatarStorage:
    """업로드된 아바타를 디스크에 저장"""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    async def save(self, content: bytes, content_type: str | None) -> str:
        """파일 저장 후 정적 경로(/uploads/avatars/<name>) 반환"""
        filename = build_avatar_filename(content_type)
        target = self.directory / filename

        def _write() -> None:
            self.directory.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)

        await run_in_threadpool(_write)
        logger.info("아바타 저장 filename=%s size=%d", filename, len(content))
        return f"{AVATAR_URL_PREFIX}/{filename}"

    async def delete(self, reference: str | None) -> None:
        """이전 아바타 파일 삭제. 이 저장소가 만든 경로가 아니면 무시"""
        if not reference or not reference.startswith(f"{AVATAR_URL_PREFIX}/"):
            return
        name = reference.rsplit("/", 1)[-1]
        if not name or name.startswith(".") or "\\" in name:
            return
        await run_in_threadpool((self.directory / name).unlink, True)
