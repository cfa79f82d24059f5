from app.infra.llm.base import BaseLLMClient
from app.infra.llm.client import (
    analyze_cv,
    analyze_skills_gap,
    find_job_offers,
    generate_cover_letter,
    generate_interview_questions,
    optimize_linkedin,
)
from app.infra.llm.factory import get_llm_client, reset_clients
from app.infra.llm.gemini_client import GeminiClient
from app.infra.llm.openai_client import OpenAIClient

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "OpenAIClient",
    "get_llm_client",
    "reset_clients",
    "analyze_cv",
    "generate_cover_letter",
    "generate_interview_questions",
    "analyze_skills_gap",
    "optimize_linkedin",
    "find_job_offers",
]
