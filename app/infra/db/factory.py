from app.core.config import Settings
from app.core.logging import get_logger
from app.infra.db.base import Database
from app.infra.db.postgres import PostgresDatabase
from app.infra.db.schema import init_schema
from app.infra.db.sqlite import SQLiteDatabase

logger = get_logger(__name__)


def create_database(settings: Settings) -> Database:
    """DATABASE_URL 유무로 백엔드 결정 - 프로세스 시작 시 한 번만 호출"""
    if settings.use_postgres:
        logger.info("데이터베이스 백엔드 선택 dialect=postgres")
        return PostgresDatabase(
            settings.database_url,
            min_size=settings.postgres_pool_min_size,
            max_size=settings.postgres_pool_max_size,
            command_timeout=settings.postgres_command_timeout,
        )

    logger.info("데이터베이스 백엔드 선택 dialect=sqlite path=%s", settings.sqlite_path)
    return SQLiteDatabase(settings.sqlite_path)


async def open_database(settings: Settings) -> Database:
    """연결 후 스키마까지 준비된 Database 반환"""
    db = create_database(settings)
    await db.connect()
    await init_schema(db)
    return db
