from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from domain import CredentialPool, GenerationParams


DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful and intelligent assistant. "
    "Always respond respectfully, briefly, and accurately."
)


class Settings(BaseModel):
    """Runtime configuration resolved from environment variables."""

    gemini_api_key: str = Field(
        default="",
        alias="GEMINI_API_KEY",
        description="Comma-separated Gemini API keys, tried in order on every request.",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        alias="GEMINI_MODEL",
        description="Generative model used for chat replies.",
    )
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_API_BASE",
        description="Base URL of the Generative Language REST API.",
    )
    upstream_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        alias="UPSTREAM_TIMEOUT_SECONDS",
        description="Timeout applied to each outbound attempt.",
    )
    history_limit: int = Field(
        default=10,
        ge=0,
        alias="HISTORY_LIMIT",
        description="Maximum number of history turns forwarded upstream.",
    )
    system_prompt: Optional[str] = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        alias="SYSTEM_PROMPT",
        description="Preamble sent before the history when the request has no customPrompt. Blank disables it.",
    )
    default_temperature: Optional[float] = Field(default=None, alias="DEFAULT_TEMPERATURE")
    default_top_k: Optional[int] = Field(default=None, alias="DEFAULT_TOP_K")
    default_top_p: Optional[float] = Field(default=None, alias="DEFAULT_TOP_P")
    cors_allow_origins: str = Field(
        default="*",
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of origins allowed to call the API.",
    )
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {"populate_by_name": True}

    @field_validator(
        "system_prompt",
        "default_temperature",
        "default_top_k",
        "default_top_p",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        return cls.model_validate(dict(os.environ))

    def credential_pool(self) -> CredentialPool:
        return CredentialPool.from_delimited(self.gemini_api_key)

    def default_generation(self) -> GenerationParams:
        return GenerationParams(
            temperature=self.default_temperature,
            top_k=self.default_top_k,
            top_p=self.default_top_p,
        )

    def allowed_origins(self) -> List[str]:
        origins = [origin.strip() for origin in self.cors_allow_origins.split(",")]
        return [origin for origin in origins if origin] or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance built from environment variables."""
    return Settings.from_env()
