"""Application configuration."""

import json
import os
from pathlib import Path
from typing import Annotated, Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Placeholder shipped in .env.example; treated as "not configured"
PLACEHOLDER_API_KEY = "sk-your-openai-api-key-here"

# Supported chat models and their context windows (in tokens)
MODEL_CONFIG: Dict[str, Dict[str, Any]] = {
    "gpt-3.5-turbo": {"provider": "openai", "max_tokens": 4096},
    "gpt-4": {"provider": "openai", "max_tokens": 8192},
    "gpt-4-turbo": {"provider": "openai", "max_tokens": 128000},
    "gpt-4o": {"provider": "openai", "max_tokens": 128000},
    "gpt-4o-mini": {"provider": "openai", "max_tokens": 128000},
    "gpt-4.1-nano": {"provider": "openai", "max_tokens": 128000},
}


def find_env_file() -> Optional[Path]:
    """Find .env file in the package directory or one of its parents."""
    current_dir = os.path.dirname(os.path.abspath(__file__))

    possible_paths = [
        os.path.join(current_dir, ".env"),
        os.path.join(os.path.dirname(current_dir), ".env"),
        os.path.join(os.path.dirname(os.path.dirname(current_dir)), ".env"),
    ]

    for path_str in possible_paths:
        if os.path.exists(path_str):
            LOGGER.info(f"Found .env file at: {path_str}")
            return Path(path_str)

    LOGGER.debug("No .env file found in expected locations")
    return None


ENV_FILE = find_env_file()

_BASE_CONFIG = SettingsConfigDict(
    env_file=str(ENV_FILE) if ENV_FILE else None,
    env_file_encoding="utf-8",
    case_sensitive=False,
    extra="ignore",
    env_prefix="",
    populate_by_name=True,
)


class LLMSettings(BaseSettings):
    """Chat-completion backend and summarization tuning."""

    api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    api_url: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        validation_alias="OPENAI_API_URL",
    )
    default_model: str = Field(default="gpt-3.5-turbo", validation_alias="DEFAULT_MODEL")

    temperature: float = Field(default=0.3, validation_alias="LLM_TEMPERATURE")
    max_output_tokens: int = Field(default=2000, validation_alias="LLM_MAX_OUTPUT_TOKENS")
    multi_max_output_tokens: int = Field(default=3000, validation_alias="LLM_MULTI_MAX_OUTPUT_TOKENS")
    individual_max_output_tokens: int = Field(
        default=1000, validation_alias="LLM_INDIVIDUAL_MAX_OUTPUT_TOKENS"
    )

    # Strategy selection
    token_threshold: int = Field(default=12000, validation_alias="SUMMARY_TOKEN_THRESHOLD")
    chunk_size: int = Field(default=4000, validation_alias="CHUNK_SIZE")
    chunk_overlap: int = Field(default=200, validation_alias="CHUNK_OVERLAP")

    max_concurrency: int = Field(default=4, validation_alias="LLM_MAX_CONCURRENCY")
    request_timeout: int = Field(default=120, validation_alias="LLM_REQUEST_TIMEOUT")
    summary_language: str = Field(default="Portuguese", validation_alias="SUMMARY_LANGUAGE")

    model_config = _BASE_CONFIG

    @property
    def is_configured(self) -> bool:
        """Whether an API key that is not the template placeholder is present."""
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY


class StorageSettings(BaseSettings):
    """Record store and upload locations."""

    db_path: str = Field(default="database.json", validation_alias="DB_STORAGE")
    upload_dir: str = Field(default="uploads", validation_alias="UPLOAD_PATH")
    max_file_size: int = Field(default=52428800, validation_alias="MAX_FILE_SIZE")  # 50MB
    max_files_per_upload: int = Field(default=10, validation_alias="MAX_FILES_PER_UPLOAD")

    model_config = _BASE_CONFIG


class AuthSettings(BaseSettings):
    """JWT issuance settings."""

    jwt_secret: str = Field(default="dev-secret-change-me-0123456789abcdef", validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    token_expiry_hours: int = Field(default=24, validation_alias="JWT_EXPIRES_HOURS")

    model_config = _BASE_CONFIG


class Settings(BaseSettings):
    """Unified application settings with nested models."""

    app_name: str = Field(default="PDF Summarizer", validation_alias="APP_NAME")
    app_version: str = "0.1.0"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=True, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    cors_origins: Annotated[list[str], NoDecode] = Field(default=["*"], validation_alias="CORS_ORIGINS")

    # API Settings
    api_v1_prefix: str = "/api/v1"
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")

    llm: LLMSettings = Field(default_factory=lambda: LLMSettings())
    storage: StorageSettings = Field(default_factory=lambda: StorageSettings())
    auth: AuthSettings = Field(default_factory=lambda: AuthSettings())

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: Any) -> Any:
        """Accept a comma-separated string or a JSON list."""
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def default_model(self) -> str:
        return self.llm.default_model

    def is_model_configured(self) -> bool:
        return self.llm.is_configured


def get_model_info(model_name: Optional[str] = None) -> Dict[str, Any]:
    """Return catalogue info for a model, falling back to the default model."""
    if model_name and model_name in MODEL_CONFIG:
        return MODEL_CONFIG[model_name]
    return MODEL_CONFIG.get(settings.default_model, MODEL_CONFIG["gpt-3.5-turbo"])


settings = Settings()

LOGGER.info(f"Settings initialized with environment: {settings.environment}")
LOGGER.info(f"LLM API key loaded: {settings.llm.is_configured}, default model: {settings.default_model}")
