from functools import lru_cache
import json
import os
from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

KNOWN_PROVIDERS = ("mock", "claude", "openai")


def _parse_list_value(value: str) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except ValueError:
            pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        validate_by_name=True,
        populate_by_name=True,
    )

    log_level: str = "INFO"
    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False

    max_upload_bytes: int = Field(default=8 * 1024 * 1024, ge=1)
    allowed_image_types: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["image/png", "image/jpeg", "image/webp"]
    )

    # --- External analysis ---
    ai_analysis_provider: str = "mock"
    ai_analysis_model: str = ""
    ai_allowed_providers_raw: str = Field(
        default="mock",
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS"),
    )
    enable_ai_overrides: bool = False
    ai_temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    ai_max_tokens: int = Field(default=1500, ge=1)
    ai_timeout_seconds: float = Field(default=20.0, gt=0)
    ai_analysis_timeout_seconds: float = Field(default=20.0, gt=0)
    ai_analysis_budget_seconds: float = Field(default=45.0, gt=0)
    ai_analysis_max_retries: int = Field(default=1, ge=0)

    anthropic_api_key: str = ""
    openai_api_key: str = ""

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=list)
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["Content-Type", "Accept"])

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        "allowed_image_types",
        mode="before",
    )
    @classmethod
    def _split_csv(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            if value.strip() == "":
                return []
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("ai_analysis_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value):
        if value is None:
            return "mock"
        return str(value).lower().strip() or "mock"

    @property
    def ai_allowed_providers(self) -> list[str]:
        """Allowlisted provider names. ``mock`` is always allowed."""
        providers = [p.lower() for p in _parse_list_value(self.ai_allowed_providers_raw)]
        if "mock" not in providers:
            providers.insert(0, "mock")
        return providers

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        """Per-provider model allowlists read from ``AI_ALLOWED_MODELS_<PROVIDER>``."""
        return {
            name: _parse_list_value(os.getenv(f"AI_ALLOWED_MODELS_{name.upper()}", ""))
            for name in KNOWN_PROVIDERS
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
