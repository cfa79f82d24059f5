"""AI 분석 API 스키마."""

from pydantic import BaseModel, ConfigDict, Field

from app.domain.account.schemas import Preferences
from app.domain.analysis.schemas import Language


class CVJobRequest(BaseModel):
    """CV와 채용 공고를 함께 받는 요청."""

    model_config = ConfigDict(populate_by_name=True)

    cv_text: str = Field(alias="cvText", min_length=1)
    job_description: str = Field(alias="jobDescription", min_length=1)
    lang: Language = "pl"


class AnalyzeCVRequest(CVJobRequest):
    preferences: Preferences | None = None


class CoverLetterRequest(CVJobRequest):
    custom_details: str | None = Field(default=None, alias="customDetails")


class CVOnlyRequest(BaseModel):
    """CV만 받는 요청."""

    model_config = ConfigDict(populate_by_name=True)

    cv_text: str = Field(alias="cvText", min_length=1)
    lang: Language = "pl"


class CoverLetterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cover_letter: str = Field(alias="coverLetter")


class InterviewQuestionsResponse(BaseModel):
    questions: list[str]
