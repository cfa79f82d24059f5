import asyncio
import re

import asyncpg

from app.core.logging import get_logger
from app.infra.db.base import (
    Database,
    Params,
    Row,
    RunResult,
    StorageError,
    check_params,
    is_insert,
)
from app.infra.db.placeholders import code_only, to_numbered
from app.infra.db.schema import POSTGRES_SCHEMA

logger = get_logger(__name__)

RETURNING_PATTERN = re.compile(r"\bRETURNING\b", re.IGNORECASE)

# command_timeout 초과는 asyncio.TimeoutError로 올라옴
DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def _wrap(e: Exception) -> StorageError:
    return StorageError(
        f"Postgres 작업 실패: {type(e).__name__}",
        is_integrity_error=isinstance(e, asyncpg.IntegrityConstraintViolationError),
    )


def prepare_query(query: str, params: Params) -> str:
    """`?`를 `$n`으로 바꾼 쿼리 반환. 개수가 맞지 않으면 StorageError"""
    check_params(query, params)
    translated, _ = to_numbered(query)
    return translated


def with_returning_id(query: str) -> str:
    """INSERT에 RETURNING 절이 없으면 추가. 문자열 리터럴 안의 단어는 무시"""
    if RETURNING_PATTERN.search(code_only(query)):
        return query
    return f"{query.rstrip().rstrip(';')} RETURNING id"


def parse_row_count(status: str) -> int:
    """'DELETE 3', 'UPDATE 1', 'INSERT 0 1' 형태의 상태 문자열에서 행 수 추출"""
    parts = status.split()
    if parts and parts[-1].isdigit():
        return int(parts[-1])
    return 0


class PostgresDatabase(Database):
    """asyncpg 커넥션 풀 기반 Postgres 백엔드"""

    dialect = "postgres"
    schema = POSTGRES_SCHEMA

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StorageError("Postgres 풀이 초기화되지 않았습니다")
        return self._pool

    async def connect(self) -> None:
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
            )
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        logger.info("Postgres 풀 생성 min=%d max=%d", self.min_size, self.max_size)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def get(self, query: str, params: Params = ()) -> Row | None:
        sql = prepare_query(query, params)
        try:
            record = await self.pool.fetchrow(sql, *params)
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        return dict(record) if record is not None else None

    async def all(self, query: str, params: Params = ()) -> list[Row]:
        sql = prepare_query(query, params)
        try:
            records = await self.pool.fetch(sql, *params)
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        return [dict(record) for record in records]

    async def run(self, query: str, params: Params = ()) -> RunResult:
        sql = prepare_query(query, params)
        try:
            if is_insert(query):
                record = await self.pool.fetchrow(with_returning_id(sql), *params)
                inserted_id = record["id"] if record is not None else None
                return RunResult(inserted_id=inserted_id, row_count=1 if record else 0)
            status = await self.pool.execute(sql, *params)
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        return RunResult(row_count=parse_row_count(status))

    async def exec(self, script: str) -> None:
        try:
            await self.pool.execute(script)
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e

    async def ensure_columns(self, table: str, columns: dict[str, str]) -> None:
        statements = [
            f"ALTER TABLE {table} ADD COLUMN IF NOT EXISTS {name} {definition};"
            for name, definition in columns.items()
        ]
        await self.exec("\n".join(statements))
