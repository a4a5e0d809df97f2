"""Tests for environment-driven settings."""

import pytest

from builddoctor.config import Settings, load_settings


ENV_VARS = [
    "OPENAI_API_KEY",
    "BUILDDOCTOR_AI_MODEL",
    "BUILDDOCTOR_AI_BASE_URL",
    "BUILDDOCTOR_HTTP_TIMEOUT",
    "GITHUB_TOKEN",
    "BUILDDOCTOR_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadSettings:
    def test_defaults(self, clean_env):
        assert load_settings() == Settings()

    def test_from_env(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        clean_env.setenv("BUILDDOCTOR_AI_MODEL", "gpt-4o-mini")
        clean_env.setenv("BUILDDOCTOR_HTTP_TIMEOUT", "7.5")
        clean_env.setenv("GITHUB_TOKEN", "ghp_env")
        clean_env.setenv("BUILDDOCTOR_LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.openai_api_key == "sk-env"
        assert settings.ai_model == "gpt-4o-mini"
        assert settings.http_timeout == 7.5
        assert settings.github_token == "ghp_env"
        assert settings.log_level == "DEBUG"

    def test_blank_secrets_are_unset(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "")
        clean_env.setenv("GITHUB_TOKEN", "")
        settings = load_settings()
        assert settings.openai_api_key is None
        assert settings.github_token is None

    def test_bad_timeout(self, clean_env):
        clean_env.setenv("BUILDDOCTOR_HTTP_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            load_settings()

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Settings().ai_model = "other"
