from __future__ import annotations

import pytest
from pydantic import ValidationError

from arboretum import config
from arboretum.config import Settings
from arboretum.llm.gemini_provider import DEFAULT_MODEL


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("API_KEY", "GEMINI_API_KEY", "TEMPERATURE", "MODEL_NAME"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.api_key is None
    assert settings.has_credentials is False
    assert settings.model_name == DEFAULT_MODEL
    assert settings.temperature == 0.0
    assert (settings.viewport_width, settings.viewport_height) == (1280, 800)


@pytest.mark.parametrize("name", ["API_KEY", "GEMINI_API_KEY"])
def test_key_from_environment(monkeypatch, name):
    monkeypatch.setenv(name, "secret")
    settings = Settings(_env_file=None)
    assert settings.api_key == "secret"
    assert settings.has_credentials is True


def test_blank_key_counts_as_missing(monkeypatch):
    monkeypatch.setenv("API_KEY", "   ")
    assert Settings(_env_file=None).has_credentials is False


def test_key_is_stripped():
    assert Settings(_env_file=None, api_key=" k ").api_key == "k"


@pytest.mark.parametrize("value", [-0.1, 0.5, 1.0])
def test_temperature_out_of_range(value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, temperature=value)


def test_temperature_from_environment(monkeypatch):
    monkeypatch.setenv("TEMPERATURE", "0.2")
    assert Settings(_env_file=None).temperature == 0.2


def test_global_instance():
    assert isinstance(config.settings, Settings)
