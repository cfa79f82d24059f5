import asyncio
import json
import os
import re
from typing import Any, TypeVar

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.runnables import Runnable
from langfuse.langchain import CallbackHandler
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import CustomException, LLMError, LLMTimeoutError
from app.core.logging import get_logger
from app.domain.account.schemas import Preferences
from app.domain.analysis import prompts
from app.domain.analysis.schemas import (
    CVAnalysis,
    InterviewQuestions,
    JobOffer,
    JobOffers,
    LinkedInOptimization,
    SkillsGap,
)
from app.infra.llm.factory import get_llm_client

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

JSON_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)

if settings.langfuse_public_key:
    os.environ["LANGFUSE_PUBLIC_KEY"] = settings.langfuse_public_key
if settings.langfuse_secret_key:
    os.environ["LANGFUSE_SECRET_KEY"] = settings.langfuse_secret_key
if settings.langfuse_base_url:
    os.environ["LANGFUSE_HOST"] = settings.langfuse_base_url


def get_langfuse_handler() -> CallbackHandler | None:
    """Langfuse 콜백 핸들러 반환"""
    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        return None

    return CallbackHandler()


def _build_config(tags: list[str]) -> dict:
    langfuse_handler = get_langfuse_handler()
    return {
        "callbacks": [langfuse_handler] if langfuse_handler else [],
        "metadata": {"langfuse_tags": ["cv", *tags]},
    }


def _build_messages(system: str, human: str) -> list:
    return [SystemMessage(content=system), HumanMessage(content=human)]


def _message_text(content: Any) -> str:
    """AIMessage.content는 문자열 또는 파트 리스트일 수 있음"""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


async def _with_deadline(coro, timeout: float | None, operation: str):
    """데드라인 초과 시 호출을 취소하고 LLMTimeoutError 발생"""
    deadline = timeout if timeout is not None else settings.llm_deadline_seconds
    try:
        return await asyncio.wait_for(coro, timeout=deadline)
    except asyncio.TimeoutError as e:
        logger.warning("LLM 데드라인 초과 operation=%s deadline=%.1f", operation, deadline)
        raise LLMTimeoutError(detail=f"{operation} {deadline:.0f}s") from e
    except CustomException:
        raise
    except Exception as e:
        logger.error("LLM 호출 실패 operation=%s error=%s", operation, type(e).__name__)
        raise LLMError(detail=f"{operation}: {type(e).__name__}") from e


async def _invoke_structured(
    schema: type[T],
    system: str,
    human: str,
    operation: str,
    timeout: float | None,
) -> T:
    try:
        llm = get_llm_client().with_structured_output(schema)
    except ValueError as e:
        raise LLMError(detail=str(e)) from e

    result = await _with_deadline(
        llm.ainvoke(_build_messages(system, human), config=_build_config([operation])),
        timeout,
        operation,
    )
    if result is None:
        raise LLMError(detail=f"{operation}: 빈 응답")
    if isinstance(result, dict):
        result = schema.model_validate(result)
    return result


async def _invoke_text(system: str, human: str, operation: str, timeout: float | None) -> str:
    try:
        llm = get_llm_client().get_chat_model()
    except ValueError as e:
        raise LLMError(detail=str(e)) from e

    response = await _with_deadline(
        llm.ainvoke(_build_messages(system, human), config=_build_config([operation])),
        timeout,
        operation,
    )
    return _message_text(response.content)


async def analyze_cv(
    cv_text: str,
    job_description: str,
    lang: str = "pl",
    preferences: Preferences | None = None,
    timeout: float | None = None,
) -> CVAnalysis:
    """CV 점수, 강점/약점, 제안, 최적화된 CV 생성"""
    logger.debug("CV 분석 요청 lang=%s cv_len=%d", lang, len(cv_text))
    result = await _invoke_structured(
        CVAnalysis,
        prompts.SYSTEM_PROMPT.format(language=prompts.language_name(lang)),
        prompts.build_cv_analysis_prompt(cv_text, job_description, preferences),
        "analyze_cv",
        timeout,
    )
    logger.debug("CV 분석 완료 score=%.1f", result.score)
    return result


async def generate_cover_letter(
    cv_text: str,
    job_description: str,
    lang: str = "pl",
    custom_details: str | None = None,
    timeout: float | None = None,
) -> str:
    """자기소개서 생성 (마크다운 텍스트)"""
    return await _invoke_text(
        prompts.SYSTEM_PROMPT.format(language=prompts.language_name(lang)),
        prompts.build_cover_letter_prompt(cv_text, job_description, custom_details),
        "cover_letter",
        timeout,
    )


async def generate_interview_questions(
    cv_text: str,
    job_description: str,
    lang: str = "pl",
    timeout: float | None = None,
) -> list[str]:
    result = await _invoke_structured(
        InterviewQuestions,
        prompts.SYSTEM_PROMPT.format(language=prompts.language_name(lang)),
        prompts.INTERVIEW_QUESTIONS_HUMAN.format(cv_text=cv_text, job_description=job_description),
        "interview_questions",
        timeout,
    )
    return result.questions


async def analyze_skills_gap(
    cv_text: str,
    job_description: str,
    lang: str = "pl",
    timeout: float | None = None,
) -> SkillsGap:
    return await _invoke_structured(
        SkillsGap,
        prompts.SYSTEM_PROMPT.format(language=prompts.language_name(lang)),
        prompts.SKILLS_GAP_HUMAN.format(cv_text=cv_text, job_description=job_description),
        "skills_gap",
        timeout,
    )


async def optimize_linkedin(
    cv_text: str,
    lang: str = "pl",
    timeout: float | None = None,
) -> LinkedInOptimization:
    return await _invoke_structured(
        LinkedInOptimization,
        prompts.SYSTEM_PROMPT.format(language=prompts.language_name(lang)),
        prompts.LINKEDIN_HUMAN.format(cv_text=cv_text),
        "linkedin",
        timeout,
    )


def _extract_json(text: str) -> Any:
    """모델 텍스트 응답에서 JSON 추출. 코드 펜스나 앞뒤 설명이 붙어도 허용"""
    fenced = JSON_FENCE_PATTERN.search(text)
    if fenced:
        text = fenced.group(1)
    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    start = min((i for i in (text.find("["), text.find("{")) if i != -1), default=-1)
    end = max(text.rfind("]"), text.rfind("}"))
    if start == -1 or end <= start:
        raise ValueError("JSON을 찾을 수 없습니다")
    return json.loads(text[start : end + 1])


def _parse_job_offers(text: str) -> JobOffers:
    try:
        data = _extract_json(text)
        if isinstance(data, list):
            data = {"offers": data}
        return JobOffers.model_validate(data)
    except (ValueError, PydanticValidationError) as e:
        logger.warning("채용 공고 응답 파싱 실패 error=%s", type(e).__name__)
        raise LLMError(detail=f"job_offers: 응답 파싱 실패 ({type(e).__name__})") from e


async def _search_job_offers(
    llm: Runnable,
    system: str,
    cv_text: str,
    timeout: float | None,
) -> list[JobOffer]:
    """검색 그라운딩 모델로 실제 공고를 찾은 뒤 JSON 텍스트를 파싱"""
    response = await _with_deadline(
        llm.ainvoke(
            _build_messages(system, prompts.build_job_offers_prompt(cv_text, grounded=True)),
            config=_build_config(["job_offers", "search"]),
        ),
        timeout,
        "job_offers",
    )
    return _parse_job_offers(_message_text(response.content)).offers


async def find_job_offers(
    cv_text: str,
    lang: str = "pl",
    timeout: float | None = None,
) -> list[JobOffer]:
    """CV에 맞는 채용 공고 목록

    Gemini는 Google Search 그라운딩으로 실제 공고와 링크를 찾는다.
    검색 도구가 없는 프로바이더는 구조화 출력만 사용한다.
    """
    system = prompts.JOB_OFFERS_SYSTEM.format(language=prompts.language_name(lang))
    try:
        grounded = get_llm_client().with_search_grounding()
    except ValueError as e:
        raise LLMError(detail=str(e)) from e

    if grounded is not None:
        offers = await _search_job_offers(grounded, system, cv_text, timeout)
    else:
        result = await _invoke_structured(
            JobOffers,
            system,
            prompts.build_job_offers_prompt(cv_text),
            "job_offers",
            timeout,
        )
        offers = result.offers

    logger.info("채용 공고 조회 완료 count=%d grounded=%s", len(offers), grounded is not None)
    return offers
