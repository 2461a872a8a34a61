"""
Tests for RelaySettings and its environment loading.
"""

import pytest
from pydantic import ValidationError

from voice_relay.config.constants import DEFAULT_REALTIME_MODEL
from voice_relay.config.settings import RelaySettings

RELAY_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_PROJECT_ID",
    "PUBLIC_BASE_URL",
    "OPENAI_API_BASE",
    "OPENAI_REALTIME_URL",
    "OPENAI_REALTIME_MODEL",
    "SIP_FALLBACK_TARGET_URI",
    "PROVIDER_TIMEOUT",
    "CORS_ORIGINS",
    "PORT",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env_reads_variables(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-env")
    clean_env.setenv("OPENAI_PROJECT_ID", "proj_env")
    clean_env.setenv("PUBLIC_BASE_URL", "https://relay.example.com")
    clean_env.setenv("SIP_FALLBACK_TARGET_URI", "tel:+15550001111")
    clean_env.setenv("OPENAI_REALTIME_MODEL", "gpt-realtime-mini")
    clean_env.setenv("PROVIDER_TIMEOUT", "12.5")
    clean_env.setenv("CORS_ORIGINS", "http://localhost:5173, https://app.example.com")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = RelaySettings.from_env(load_dotenv=False)

    assert settings.openai_api_key == "sk-env"
    assert settings.openai_project_id == "proj_env"
    assert settings.fallback_target_uri == "tel:+15550001111"
    assert settings.realtime_model == "gpt-realtime-mini"
    assert settings.provider_timeout == 12.5
    assert settings.cors_origins == ["http://localhost:5173", "https://app.example.com"]
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.api_key_configured is True


def test_from_env_defaults(clean_env):
    settings = RelaySettings.from_env(load_dotenv=False)

    assert settings.openai_api_key == ""
    assert settings.api_key_configured is False
    assert settings.realtime_model == DEFAULT_REALTIME_MODEL
    assert settings.fallback_target_uri is None
    assert settings.cors_origins == ["*"]
    assert settings.port == 3001
    assert settings.webhook_url is None
    assert settings.sip_uri is None


def test_blank_optional_values_are_none(clean_env):
    clean_env.setenv("OPENAI_PROJECT_ID", "")
    clean_env.setenv("SIP_FALLBACK_TARGET_URI", "  ")

    settings = RelaySettings.from_env(load_dotenv=False)

    assert settings.openai_project_id is None
    assert settings.fallback_target_uri is None


@pytest.mark.parametrize("name,value", [("PORT", "not-a-port"), ("PROVIDER_TIMEOUT", "-1")])
def test_invalid_values_raise_validation_error(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ValidationError):
        RelaySettings.from_env(load_dotenv=False)


def test_keyword_arguments_override_environment(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-env")

    settings = RelaySettings(
        _env_file=None, openai_api_key="sk-explicit", api_base="https://proxy.example.com/v1"
    )

    assert settings.openai_api_key == "sk-explicit"
    assert settings.api_base == "https://proxy.example.com/v1"


def test_setup_urls_are_rendered():
    settings = RelaySettings(
        _env_file=None, openai_project_id="proj_abc", public_base_url="https://relay.example.com/"
    )
    assert settings.webhook_url == "https://relay.example.com/api/sip/webhook"
    assert settings.sip_uri == "sip:proj_abc@sip.api.openai.com;transport=tls"
