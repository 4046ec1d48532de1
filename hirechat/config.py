"""Application configuration settings."""

import os
from typing import List
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class Settings:
    """Application settings."""

    # Database - profiles, chats and messages
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./hirechat.db")

    # JWT (also signs resume download URLs)
    secret_key: str = os.getenv("SECRET_KEY", "your-secret-key-here")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

    # CyborgDB
    cyborgdb_host: str = os.getenv("CYBORGDB_HOST", "localhost")
    cyborgdb_port: int = int(os.getenv("CYBORGDB_PORT", "8100"))
    cyborgdb_api_key: str = os.getenv("CYBORGDB_API_KEY", "your-api-key")
    cyborgdb_index_key_file: str = os.getenv("CYBORGDB_INDEX_KEY_FILE", "")
    cyborgdb_index_name: str = os.getenv("CYBORGDB_INDEX_NAME", "hirechat_resumes")
    vector_index_timeout: float = float(os.getenv("VECTOR_INDEX_TIMEOUT", "10"))

    # Embeddings. Provider and model must not change once vectors are indexed.
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "sentence-transformers")
    vector_model_name: str = os.getenv("VECTOR_MODEL_NAME", "sentence-transformers/all-MiniLM-L6-v2")
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "384"))

    # LLM
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
    openai_max_tokens: int = int(os.getenv("OPENAI_MAX_TOKENS", "2000"))
    openai_timeout: float = float(os.getenv("OPENAI_TIMEOUT", "30"))
    openai_max_retries: int = int(os.getenv("OPENAI_MAX_RETRIES", "3"))

    # Object storage
    storage_dir: str = os.getenv("STORAGE_DIR", "./storage/resumes")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
    frontend_base_url: str = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
    signed_url_ttl_seconds: int = int(os.getenv("SIGNED_URL_TTL_SECONDS", "3600"))

    # Resume upload
    max_file_size_mb: int = int(os.getenv("MAX_FILE_SIZE_MB", "5"))
    allowed_file_types: List[str] = ["pdf"]
    min_resume_text_length: int = int(os.getenv("MIN_RESUME_TEXT_LENGTH", "50"))

    # Shortlisting
    shortlist_size: int = int(os.getenv("SHORTLIST_SIZE", "5"))
    search_overfetch: int = int(os.getenv("SEARCH_OVERFETCH", "20"))

    # Security
    allowed_origins: List[str] = os.getenv("ALLOWED_ORIGINS", "*").split(",")

    # Development
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
