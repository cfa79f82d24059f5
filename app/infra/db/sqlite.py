from pathlib import Path

import aiosqlite

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
from app.infra.db.schema import SQLITE_SCHEMA

logger = get_logger(__name__)

# 64비트를 넘는 정수 파라미터는 sqlite3가 OverflowError로 거부
DRIVER_ERRORS = (aiosqlite.Error, OverflowError)


def _wrap(e: Exception) -> StorageError:
    return StorageError(
        f"SQLite 작업 실패: {type(e).__name__}",
        is_integrity_error=isinstance(e, aiosqlite.IntegrityError),
    )


class SQLiteDatabase(Database):
    """단일 파일 SQLite 백엔드 (aiosqlite)

    드라이버가 `?`를 그대로 지원하므로 쿼리 변환 없이 실행한다.
    autocommit 모드로 열어 각 문장이 독립적으로 커밋된다.
    """

    dialect = "sqlite"
    schema = SQLITE_SCHEMA

    def __init__(self, path: str):
        self.path = path
        self._conn: aiosqlite.Connection | None = None

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageError("SQLite 연결이 초기화되지 않았습니다")
        return self._conn

    async def connect(self) -> None:
        if self._conn is not None:
            return
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = await aiosqlite.connect(self.path, isolation_level=None)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA foreign_keys = ON")
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        logger.info("SQLite 연결 path=%s", self.path)

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def get(self, query: str, params: Params = ()) -> Row | None:
        check_params(query, params)
        try:
            async with self.connection.execute(query, tuple(params)) as cursor:
                row = await cursor.fetchone()
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        return dict(row) if row is not None else None

    async def all(self, query: str, params: Params = ()) -> list[Row]:
        check_params(query, params)
        try:
            async with self.connection.execute(query, tuple(params)) as cursor:
                rows = await cursor.fetchall()
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        return [dict(row) for row in rows]

    async def run(self, query: str, params: Params = ()) -> RunResult:
        check_params(query, params)
        try:
            async with self.connection.execute(query, tuple(params)) as cursor:
                inserted_id = cursor.lastrowid if is_insert(query) else None
                row_count = cursor.rowcount
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e
        return RunResult(inserted_id=inserted_id, row_count=max(row_count, 0))

    async def exec(self, script: str) -> None:
        try:
            await self.connection.executescript(script)
        except DRIVER_ERRORS as e:
            raise _wrap(e) from e

    async def ensure_columns(self, table: str, columns: dict[str, str]) -> None:
        rows = await self.all(f"PRAGMA table_info({table})")
        existing = {row["name"] for row in rows}
        for name, definition in columns.items():
            if name in existing:
                continue
            await self.exec(f"ALTER TABLE {table} ADD COLUMN {name} {definition}")
            logger.info("컬럼 추가 table=%s column=%s", table, name)
