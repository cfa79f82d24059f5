from fastapi import APIRouter, Depends, Request

from app.api.deps import get_optional_account
from app.api.schemas.analysis import (
    AnalyzeCVRequest,
    CoverLetterRequest,
    CoverLetterResponse,
    CVJobRequest,
    CVOnlyRequest,
    InterviewQuestionsResponse,
)
from app.core.config import settings
from app.core.limiter import limiter
from app.core.logging import get_logger
from app.domain.account.schemas import Account
from app.domain.analysis.schemas import (
    CVAnalysis,
    JobOffer,
    LinkedInOptimization,
    SkillsGap,
)
from app.infra.llm import client as llm

router = APIRouter(prefix="/analysis", tags=["analysis"])
logger = get_logger(__name__)

RATE_LIMIT = settings.analysis_rate_limit


@router.post("/cv", response_model=CVAnalysis)
@limiter.limit(RATE_LIMIT)
async def analyze_cv(
    request: Request,
    body: AnalyzeCVRequest,
    account: Account | None = Depends(get_optional_account),
) -> CVAnalysis:
    # 요청에 선호 설정이 없으면 로그인한 사용자의 저장된 설정 사용
    preferences = body.preferences
    if preferences is None and account is not None:
        preferences = account.preferences

    logger.info(
        "CV 분석 시작 lang=%s logged_in=%s", body.lang, account is not None
    )
    return await llm.analyze_cv(body.cv_text, body.job_description, body.lang, preferences)


@router.post("/cover-letter", response_model=CoverLetterResponse)
@limiter.limit(RATE_LIMIT)
async def cover_letter(request: Request, body: CoverLetterRequest) -> CoverLetterResponse:
    text = await llm.generate_cover_letter(
        body.cv_text, body.job_description, body.lang, body.custom_details
    )
    return CoverLetterResponse(cover_letter=text)


@router.post("/interview-questions", response_model=InterviewQuestionsResponse)
@limiter.limit(RATE_LIMIT)
async def interview_questions(request: Request, body: CVJobRequest) -> InterviewQuestionsResponse:
    questions = await llm.generate_interview_questions(body.cv_text, body.job_description, body.lang)
    return InterviewQuestionsResponse(questions=questions)


@router.post("/skills-gap", response_model=SkillsGap)
@limiter.limit(RATE_LIMIT)
async def skills_gap(request: Request, body: CVJobRequest) -> SkillsGap:
    return await llm.analyze_skills_gap(body.cv_text, body.job_description, body.lang)


@router.post("/linkedin", response_model=LinkedInOptimization)
@limiter.limit(RATE_LIMIT)
async def linkedin(request: Request, body: CVOnlyRequest) -> LinkedInOptimization:
    return await llm.optimize_linkedin(body.cv_text, body.lang)


@router.post("/job-offers", response_model=list[JobOffer])
@limiter.limit(RATE_LIMIT)
async def job_offers(request: Request, body: CVOnlyRequest) -> list[JobOffer]:
    return await llm.find_job_offers(body.cv_text, body.lang)
