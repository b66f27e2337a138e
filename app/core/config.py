from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_name: str = "Tour IA API"
    api_prefix: str = "/api"

    openai_api_key: str = Field(default="", description="Optional OpenAI API key")
    openai_model_plan: str = "gpt-3.5-turbo"
    openai_model_chat: str = "gpt-4o-mini"
    plan_temperature: float = 0.7
    model_timeout_seconds: float = 60.0

    history_file: str = "data/history.json"

    language: str = "Spanish"
    banner_fallback: str = "Explora nuevos destinos con confianza y curiosidad."

    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
