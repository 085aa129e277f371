"""Application configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    PROJECT_NAME: str = "Weave Memory"
    VERSION: str = "0.3.0"

    # Database Settings
    # Plain PostgreSQL URLs; driver (+psycopg) is added programmatically in database.py
    DATABASE_URL: str = ""  # Runtime connection (memories, focus sessions, users)
    MIGRATION_DATABASE_URL: str = ""  # Migrations: direct connection

    # Embeddings
    OPENAI_API_KEY: str = ""
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_DIMENSION: int = 1536

    # Vector index
    # "pgvector" | "memory" | "" (not configured: searches return nothing, writes fail)
    VECTOR_INDEX_BACKEND: str = ""
    VECTOR_METADATA_CONTENT_LIMIT: int = 1000  # Chars of content kept beside each vector

    # Retrieval
    DEFAULT_TOP_K: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"


# Global settings instance
settings = Settings()
