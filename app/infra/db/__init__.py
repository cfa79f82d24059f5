from app.infra.db.base import Database, RunResult, StorageError
from app.infra.db.factory import create_database, open_database
from app.infra.db.postgres import PostgresDatabase
from app.infra.db.schema import ANALYSIS_SCHEMA_VERSION, init_schema
from app.infra.db.sqlite import SQLiteDatabase

__all__ = [
    "Database",
    "RunResult",
    "StorageError",
    "SQLiteDatabase",
    "PostgresDatabase",
    "create_database",
    "open_database",
    "init_schema",
    "ANALYSIS_SCHEMA_VERSION",
]
