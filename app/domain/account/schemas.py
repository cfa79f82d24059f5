import json
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

Theme = Literal["light", "dark"]
SummaryTone = Literal["professional", "friendly", "formal", "creative", "concise"]


class Preferences(BaseModel):
    """CV 생성 선호 설정"""

    include_projects: bool = True
    emphasized_keywords: list[str] = Field(default_factory=list)
    preferred_sections: list[str] = Field(default_factory=list)
    summary_tone: SummaryTone = "professional"


class Account(BaseModel):
    """클라이언트에 노출되는 계정 정보 - 비밀번호 필드 없음"""

    id: int
    email: str
    name: str | None = None
    avatar: str | None = None
    bio: str | None = None
    theme: Theme = "light"
    target_role: str | None = None
    experience_level: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    preferences: Preferences = Field(default_factory=Preferences)
    created_at: datetime | None = None

    @field_validator("theme", mode="before")
    @classmethod
    def default_theme(cls, v: Any) -> Any:
        return v if v in ("light", "dark") else "light"

    @field_validator("preferences", mode="before")
    @classmethod
    def parse_preferences(cls, v: Any) -> Any:
        """DB에는 JSON 문자열로 저장됨. 깨진 값은 기본값으로 대체"""
        if v is None or v == "":
            return {}
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError:
                return {}
        return v if isinstance(v, dict | Preferences) else {}


class ProfileUpdate(BaseModel):
    """부분 수정 요청 - 전달된 필드만 변경"""

    name: str | None = None
    bio: str | None = None
    theme: Theme | None = None
    target_role: str | None = None
    experience_level: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    preferences: Preferences | None = None
