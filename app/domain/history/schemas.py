from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class HistoryItem(BaseModel):
    """저장된 분석 기록"""

    id: int
    cv_text: str
    job_description: str
    analysis: dict[str, Any] = Field(default_factory=dict)
    analysis_version: int = 1
    created_at: datetime | None = None
