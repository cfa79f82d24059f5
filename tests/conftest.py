"""테스트 공통 fixture"""

import os
import tempfile

_TEST_ROOT = tempfile.mkdtemp(prefix="cv-optimizer-test-")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_TEST_ROOT, "uploads"))
os.environ.setdefault("SQLITE_PATH", os.path.join(_TEST_ROOT, "database.sqlite"))

from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.api.deps import get_account_service, get_db  # noqa: E402
from app.domain.account.service import AccountService  # noqa: E402
from app.domain.analysis.schemas import ATSBreakdown, CategoryScore, CVAnalysis  # noqa: E402
from app.domain.history.service import HistoryService  # noqa: E402
from app.infra.db import SQLiteDatabase, init_schema  # noqa: E402
from app.infra.storage.avatars import AvatarStorage  # noqa: E402
from app.main import app  # noqa: E402


@pytest_asyncio.fixture
async def db(tmp_path):
    """테스트마다 새 SQLite 파일"""
    database = SQLiteDatabase(str(tmp_path / "test.sqlite"))
    await database.connect()
    await init_schema(database)
    yield database
    await database.close()


@pytest.fixture
def avatar_storage(tmp_path) -> AvatarStorage:
    return AvatarStorage(str(tmp_path / "avatars"))


@pytest.fixture
def account_service(db, avatar_storage) -> AccountService:
    return AccountService(db, avatar_storage)


@pytest.fixture
def history_service(db) -> HistoryService:
    return HistoryService(db)


@pytest_asyncio.fixture
async def async_client(db, avatar_storage):
    """테스트 DB가 주입된 비동기 HTTP 클라이언트"""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_account_service] = lambda: AccountService(db, avatar_storage)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_analysis() -> dict:
    """테스트용 분석 결과 (프론트엔드가 저장하는 형태)"""
    return {
        "score": 72,
        "strengths": ["Python", "FastAPI 경험"],
        "weaknesses": ["정량적 성과 부족"],
        "suggestions": ["성과를 수치로 표현"],
        "optimizedContent": "# CV: Alice\n## SKILLS\n- Python",
        "atsBreakdown": {
            "formatting": {"score": 15, "feedback": "ok"},
            "keywords": {"score": 14, "feedback": "ok"},
            "structure": {"score": 15, "feedback": "ok"},
            "relevance": {"score": 14, "feedback": "ok"},
            "impact": {"score": 14, "feedback": "ok"},
        },
    }


@pytest.fixture
def sample_cv_analysis() -> CVAnalysis:
    category = CategoryScore(score=16, feedback="좋음")
    return CVAnalysis(
        score=80,
        strengths=["명확한 구조"],
        weaknesses=["키워드 부족"],
        suggestions=["Kubernetes 추가"],
        optimizedContent="# CV: Alice",
        atsBreakdown=ATSBreakdown(
            formatting=category,
            keywords=category,
            structure=category,
            relevance=category,
            impact=category,
        ),
    )


@pytest.fixture
def mock_llm_client():
    """LLM 클라이언트 mock"""
    with patch("app.infra.llm.client.get_llm_client") as mock_get:
        mock_client = MagicMock()
        mock_get.return_value = mock_client
        yield mock_client
