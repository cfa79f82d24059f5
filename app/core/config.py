from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    environment: str = "development"

    # 데이터베이스 설정: DATABASE_URL이 있으면 Postgres, 없으면 SQLite 파일
    database_url: str = ""
    sqlite_path: str = "database.sqlite"
    postgres_pool_min_size: int = 1
    postgres_pool_max_size: int = 10
    postgres_command_timeout: float = 30.0

    # 세션 설정
    session_cookie_name: str = "session_token"
    session_ttl_days: int = 7

    # 비밀번호 해시 비용
    bcrypt_rounds: int = 10

    # 아바타 업로드 설정
    upload_dir: str = "uploads"
    max_avatar_bytes: int = 5 * 1024 * 1024

    # LLM 프로바이더 선택: "gemini" 또는 "openai"
    llm_provider: str = "gemini"

    # Gemini 설정 - 기본 분석용
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-pro"
    gemini_timeout: float = 120.0

    # OpenAI 호환 설정 - base_url을 지정하면 vLLM 등 호환 서버 사용
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = ""
    openai_timeout: float = 120.0

    # LLM 호출 데드라인 (초)
    llm_deadline_seconds: float = 90.0

    # 분석 API 요청 제한
    analysis_rate_limit: str = "20/minute"

    # 로깅 설정
    log_level: str = "INFO"

    # CORS 설정
    cors_allowed_origins: str = ""

    # Langfuse 설정
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def use_postgres(self) -> bool:
        return bool(self.database_url.strip())

    @property
    def avatar_dir(self) -> str:
        return f"{self.upload_dir.rstrip('/')}/avatars"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    def validate_for_production(self) -> list[str]:
        """프로덕션 환경에서 필수 설정 검증 후 누락된 항목 반환"""
        errors = []
        if self.llm_provider == "gemini" and not self.gemini_api_key:
            errors.append("GEMINI_API_KEY")
        if self.llm_provider == "openai" and not self.openai_api_key:
            errors.append("OPENAI_API_KEY")
        return errors

    @model_validator(mode="after")
    def validate_provider(self):
        """지원하는 LLM 프로바이더인지 검증"""
        if self.llm_provider not in ("gemini", "openai"):
            raise ValueError(f"지원하지 않는 LLM 프로바이더: {self.llm_provider}")
        return self


settings = Settings()
