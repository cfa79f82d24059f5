import json
from typing import Any

from app.core.exceptions import UnavailableError
from app.core.logging import get_logger
from app.domain.history.schemas import HistoryItem
from app.infra.db import ANALYSIS_SCHEMA_VERSION, Database, StorageError

logger = get_logger(__name__)

# history.id는 Postgres SERIAL(int4) 범위
MAX_RECORD_ID = 2**31 - 1


def _parse_analysis(raw: str | None, record_id: int) -> dict[str, Any]:
    """저장된 JSON 파싱. 깨진 레코드는 빈 분석으로 반환"""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("분석 JSON 파싱 실패 record_id=%d", record_id)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("분석 JSON 형식 오류 record_id=%d type=%s", record_id, type(parsed).__name__)
        return {}
    return parsed


class HistoryService:
    """계정별 분석 기록 저장/조회/삭제

    모든 조회와 삭제는 user_id 조건을 포함한다.
    """

    def __init__(self, db: Database):
        self.db = db

    async def append(
        self,
        account_id: int,
        cv_text: str,
        job_description: str,
        analysis: dict[str, Any],
    ) -> None:
        """항상 새 레코드 추가"""
        try:
            result = await self.db.run(
                "INSERT INTO history (user_id, cv_text, job_description, analysis, analysis_version) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    account_id,
                    cv_text,
                    job_description,
                    json.dumps(analysis, ensure_ascii=False),
                    ANALYSIS_SCHEMA_VERSION,
                ),
            )
        except StorageError as e:
            logger.error("기록 저장 실패 error=%s", e)
            raise UnavailableError(detail=str(e)) from e
        logger.info("기록 저장 record_id=%s", result.inserted_id)

    async def list(self, account_id: int) -> list[HistoryItem]:
        """최신순 목록"""
        try:
            rows = await self.db.all(
                "SELECT id, cv_text, job_description, analysis, analysis_version, created_at "
                "FROM history WHERE user_id = ? ORDER BY created_at DESC, id DESC",
                (account_id,),
            )
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e

        return [
            HistoryItem(
                id=row["id"],
                cv_text=row["cv_text"],
                job_description=row["job_description"],
                analysis=_parse_analysis(row["analysis"], row["id"]),
                analysis_version=row["analysis_version"] or ANALYSIS_SCHEMA_VERSION,
                created_at=row["created_at"],
            )
            for row in rows
        ]

    async def remove(self, account_id: int, record_id: int) -> None:
        """소유자의 레코드만 삭제. 없거나 남의 레코드여도 성공으로 처리"""
        if not 1 <= record_id <= MAX_RECORD_ID:
            logger.info("범위 밖 기록 삭제 요청 무시 record_id=%d", record_id)
            return
        try:
            result = await self.db.run(
                "DELETE FROM history WHERE id = ? AND user_id = ?",
                (record_id, account_id),
            )
        except StorageError as e:
            raise UnavailableError(detail=str(e)) from e
        logger.info("기록 삭제 record_id=%d deleted=%d", record_id, result.row_count)
