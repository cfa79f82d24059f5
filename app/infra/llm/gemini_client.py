from langchain_core.language_models import BaseChatModel
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI

from app.core.config import settings
from app.infra.llm.base import BaseLLMClient

GOOGLE_SEARCH_TOOL = {"google_search": {}}


class GeminiClient(BaseLLMClient):
    """Gemini 클라이언트 - 기본 CV 분석용"""

    def __init__(self):
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY가 설정되지 않았습니다")

        self._model = ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            google_api_key=settings.gemini_api_key,
            timeout=settings.gemini_timeout,
            temperature=0.4,
        )

    def get_chat_model(self) -> BaseChatModel:
        """LangChain ChatGoogleGenerativeAI 모델 반환"""
        return self._model

    def get_model_name(self) -> str:
        return settings.gemini_model

    def with_search_grounding(self) -> Runnable:
        """Google Search 그라운딩 도구를 연결한 모델 - 실제 채용 공고 검색용"""
        return self._model.bind_tools([GOOGLE_SEARCH_TOOL])
