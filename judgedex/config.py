from typing import List
from pydantic import PostgresDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Judgedex API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # CourtListener
    COURTLISTENER_BASE_URL: str = "https://www.courtlistener.com/api/rest/v4"
    COURTLISTENER_TOKEN: str = ""
    COURTLISTENER_TIMEOUT: float = 15.0
    COURTLISTENER_OPINIONS_LIMIT: int = 10

    # Response cache
    CACHE_BACKEND: str = "memory"  # memory | redis
    CACHE_MAX_ENTRIES: int = 1024
    REDIS_URL: str = ""

    # LLM
    LLM_PROVIDER: str = "openai"  # openai | anthropic | ollama
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-latest"
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama3.1"
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 2000
    LLM_TIMEOUT: float = 60.0

    # Rate limiting
    JUDGE_PROFILE_RATE_LIMIT: str = "100 per 15 minutes"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "judgedex"
    POSTGRES_PORT: int = 5432

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> PostgresDsn:
        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

settings = Settings()
