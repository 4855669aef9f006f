"""
Process-wide configuration.

Read once from the environment at process start and passed down to
acquirers, extractors and the HTTP app. Read-only afterwards.
"""

from __future__ import annotations

from typing import Mapping, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ORCID_API_BASE_URL = "https://pub.orcid.org/v3.0"
ORCID_USER_AGENT = "Fundizzle/1.0 (mailto:support@fundizzle.com)"

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
# Heuristic only: roughly 2.5 characters per token for JSON-heavy prompts.
CHARS_PER_TOKEN = 2.5
MAX_PROMPT_TOKENS = 8000


class Settings(BaseSettings):
    """
    profileextract configuration.

    Every field can be set by keyword or through the environment variable
    named in its alias. Empty variables fall back to the default.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o", validation_alias="PROFILEEXTRACT_OPENAI_MODEL")
    orcid_model: str = Field(default="gpt-4o", validation_alias="PROFILEEXTRACT_ORCID_MODEL")
    orcid_base_url: str = Field(default=ORCID_API_BASE_URL, validation_alias="ORCID_API_BASE_URL")
    orcid_user_agent: str = Field(default=ORCID_USER_AGENT, validation_alias="ORCID_USER_AGENT")
    http_timeout_s: float = Field(default=10.0, gt=0, validation_alias="PROFILEEXTRACT_HTTP_TIMEOUT")
    generation_timeout_s: float = Field(default=60.0, gt=0, validation_alias="PROFILEEXTRACT_GENERATION_TIMEOUT")
    max_upload_bytes: int = Field(default=MAX_UPLOAD_BYTES, gt=0, validation_alias="PROFILEEXTRACT_MAX_UPLOAD_BYTES")
    max_prompt_tokens: int = Field(default=MAX_PROMPT_TOKENS, gt=0, validation_alias="PROFILEEXTRACT_MAX_PROMPT_TOKENS")
    chars_per_token: float = Field(default=CHARS_PER_TOKEN, gt=0, validation_alias="PROFILEEXTRACT_CHARS_PER_TOKEN")

    @field_validator("orcid_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("openai_api_key")
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None

    @property
    def generation_configured(self) -> bool:
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the process environment, or from `env` alone when given.

        Raises pydantic's ValidationError (a ValueError) for malformed values.
        """
        if env is None:
            return cls()
        return cls.model_validate({k: v for k, v in env.items() if v and v.strip()})
