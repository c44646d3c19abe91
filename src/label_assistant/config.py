"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-4"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 500
    openai_presence_penalty: float = 0.1
    openai_frequency_penalty: float = 0.1
    openai_vision_model: str = "gpt-4o"
    ocr_backend: str = "tesseract"
    ocr_language: str = "eng"
    tesseract_cmd: str | None = None
    usage_backend: str = "file"
    usage_file_path: str = "data/usage.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    kv_rest_url: str | None = None
    kv_rest_token: str | None = None
    kv_usage_key: str = "usage"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
