"""LLM 구조화 출력 스키마

필드 이름은 프론트엔드가 쓰는 camelCase 그대로 유지한다.
"""

from typing import Literal

from pydantic import BaseModel, Field

Language = Literal["pl", "en"]


class CategoryScore(BaseModel):
    """ATS 항목별 점수 (0-20)"""

    score: float = Field(ge=0, le=20)
    feedback: str


class ATSBreakdown(BaseModel):
    formatting: CategoryScore
    keywords: CategoryScore
    structure: CategoryScore
    relevance: CategoryScore
    impact: CategoryScore


class CVAnalysis(BaseModel):
    """CV 분석 결과"""

    score: float = Field(ge=0, le=100)
    strengths: list[str]
    weaknesses: list[str]
    suggestions: list[str]
    optimizedContent: str
    atsBreakdown: ATSBreakdown


class InterviewQuestions(BaseModel):
    questions: list[str]


class MissingSkill(BaseModel):
    skill: str
    importance: Literal["high", "medium", "low"]
    reason: str


class LearningStep(BaseModel):
    step: str
    resourceType: str
    duration: str


class SkillsGap(BaseModel):
    """역량 격차 분석 결과"""

    matchPercentage: float = Field(ge=0, le=100)
    missingSkills: list[MissingSkill]
    learningPath: list[LearningStep]
    careerAdvice: str


class LinkedInOptimization(BaseModel):
    headline: str
    about: str
    experienceBulletPoints: list[str]
    skillsToHighlight: list[str]


class JobOffer(BaseModel):
    title: str
    company: str
    location: str
    link: str
    snippet: str
    date_posted: str | None = None


class JobOffers(BaseModel):
    offers: list[JobOffer]
