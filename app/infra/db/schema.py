"""테이블 정의

두 백엔드는 같은 테이블을 가지며 id 컬럼과 타임스탬프 문법만 다르다.
history와 sessions는 users 삭제 시 함께 삭제된다.
"""

from app.core.logging import get_logger
from app.infra.db.base import Database

logger = get_logger(__name__)

ANALYSIS_SCHEMA_VERSION = 1

SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    name TEXT,
    avatar TEXT,
    bio TEXT,
    theme TEXT NOT NULL DEFAULT 'light',
    target_role TEXT,
    experience_level TEXT,
    linkedin_url TEXT,
    github_url TEXT,
    preferences TEXT,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
    cv_text TEXT NOT NULL,
    job_description TEXT NOT NULL,
    analysis TEXT NOT NULL,
    analysis_version INTEGER NOT NULL DEFAULT 1,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_history_user_created ON history (user_id, created_at);

CREATE TABLE IF NOT EXISTS sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    token_hash TEXT NOT NULL UNIQUE,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    expires_at INTEGER NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);
"""

POSTGRES_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    name TEXT,
    avatar TEXT,
    bio TEXT,
    theme TEXT NOT NULL DEFAULT 'light',
    target_role TEXT,
    experience_level TEXT,
    linkedin_url TEXT,
    github_url TEXT,
    preferences TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS history (
    id SERIAL PRIMARY KEY,
    user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
    cv_text TEXT NOT NULL,
    job_description TEXT NOT NULL,
    analysis TEXT NOT NULL,
    analysis_version INTEGER NOT NULL DEFAULT 1,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_history_user_created ON history (user_id, created_at);

CREATE TABLE IF NOT EXISTS sessions (
    id SERIAL PRIMARY KEY,
    token_hash TEXT NOT NULL UNIQUE,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    expires_at BIGINT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

# 초기 버전 DB(users: id, email, password, name, avatar, bio)에서 올라올 때 추가되는 컬럼
USER_PROFILE_COLUMNS = {
    "theme": "TEXT NOT NULL DEFAULT 'light'",
    "target_role": "TEXT",
    "experience_level": "TEXT",
    "linkedin_url": "TEXT",
    "github_url": "TEXT",
    "preferences": "TEXT",
}

HISTORY_COLUMNS = {
    "analysis_version": "INTEGER NOT NULL DEFAULT 1",
}


async def init_schema(db: Database) -> None:
    """테이블 생성 (매 시작 시 멱등)"""
    await db.exec(db.schema)
    await db.ensure_columns("users", USER_PROFILE_COLUMNS)
    await db.ensure_columns("history", HISTORY_COLUMNS)
    logger.info("스키마 초기화 완료 dialect=%s", db.dialect)
