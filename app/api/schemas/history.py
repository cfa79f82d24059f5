"""분석 기록 API 스키마."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SaveHistoryRequest(BaseModel):
    """분석 결과 저장 요청."""

    model_config = ConfigDict(populate_by_name=True)

    cv_text: str = Field(alias="cvText")
    job_description: str = Field(alias="jobDescription")
    analysis: dict[str, Any]
