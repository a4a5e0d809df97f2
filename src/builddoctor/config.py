"""Settings loaded from environment variables into a frozen dataclass."""

import os
from dataclasses import dataclass

from builddoctor.ai import DEFAULT_BASE_URL, DEFAULT_MODEL


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None = None
    ai_model: str = DEFAULT_MODEL
    ai_base_url: str = DEFAULT_BASE_URL
    http_timeout: float = 30.0
    github_token: str | None = None
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Build Settings from environment variables with sensible defaults.

    Raises ValueError if BUILDDOCTOR_HTTP_TIMEOUT is not a number.
    """
    return Settings(
        openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
        ai_model=os.environ.get("BUILDDOCTOR_AI_MODEL", Settings.ai_model),
        ai_base_url=os.environ.get("BUILDDOCTOR_AI_BASE_URL", Settings.ai_base_url),
        http_timeout=float(os.environ.get("BUILDDOCTOR_HTTP_TIMEOUT", Settings.http_timeout)),
        github_token=os.environ.get("GITHUB_TOKEN") or None,
        log_level=os.environ.get("BUILDDOCTOR_LOG_LEVEL", Settings.log_level).upper(),
    )
