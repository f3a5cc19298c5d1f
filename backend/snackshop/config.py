"""Settings for the SnackShop backend.

Read from the environment (and an optional .env file) with pydantic-settings.
"""

from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development. Without an
    OPENAI_API_KEY the shop still works: product names and descriptions
    come from templates and similarity search returns no matches.

    Environment Variables:
        DATABASE_URL: SQLAlchemy connection string for the key-value store
        KV_BACKEND: "sql" (default) or "memory"
        OPENAI_API_KEY: OpenAI API key for text generation and embeddings
        TEXT_MODEL: Chat model used to imagine product names/descriptions
        EMBEDDING_MODEL: Embedding model used for similarity search
        CACHE_NAMESPACE: Version prefix for all cache keys
        CACHE_TTL_SECONDS: Lifetime of cached products and embeddings
        CACHE_MAX_ENTRIES: Maximum number of cached products
        CACHE_MAX_EMBEDDINGS: Maximum number of cached embedding vectors
        LOG_LEVEL: Logging level (default INFO)
    """

    # Storage
    DATABASE_URL: str = "sqlite:///./snackshop.db"
    KV_BACKEND: str = "sql"

    # AI Providers
    OPENAI_API_KEY: Optional[str] = None
    TEXT_MODEL: str = "gpt-4o-mini"
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    AI_TIMEOUT_SECONDS: int = 30
    PRELOAD_MODELS: bool = True

    # Product cache
    CACHE_NAMESPACE: str = "v1"
    CACHE_TTL_SECONDS: int = 7 * 24 * 60 * 60  # 7 days
    CACHE_MAX_ENTRIES: int = 500
    CACHE_MAX_EMBEDDINGS: int = 2000

    # Generation
    GENERATION_BATCH_SIZE: int = 3
    GENERATION_MAX_COUNT: int = 24

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
