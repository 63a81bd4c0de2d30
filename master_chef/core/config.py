import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

SUPPORTED_LANGUAGES = ("en", "es", "hi", "ur", "mr", "bn", "ta", "te", "kn", "gu", "pa")


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    openai_api_key: str = Field(min_length=1)
    openai_model: str = "gpt-4.1-mini"
    default_language: str = "en"
    history_limit: int = Field(default=10, ge=1)

    @field_validator("default_language")
    @classmethod
    def _validate_language(cls, value: str) -> str:
        if value not in SUPPORTED_LANGUAGES:
            raise ValueError(f"unsupported language: {value}")
        return value


@lru_cache
def get_settings() -> Settings:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("Invalid configuration: OPENAI_API_KEY is required")

    raw = {
        "openai_api_key": api_key,
        "openai_model": os.getenv("OPENAI_MODEL", "gpt-4.1-mini"),
        "default_language": os.getenv("MASTER_CHEF_DEFAULT_LANGUAGE", "en").strip().lower(),
        "history_limit": os.getenv("MASTER_CHEF_HISTORY_LIMIT", "10"),
    }
    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
