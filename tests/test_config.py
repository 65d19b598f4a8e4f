# ABOUTME: Tests prediction-service config loading from YAML and environment.
# ABOUTME: Environment variables override file values.

from pathlib import Path

import pytest

from src.persona_engine.config import DEFAULT_TOKEN_TTL_SECONDS, load_prediction_config

ENV_VARS = (
    "PERSONA_API_URL",
    "PERSONA_API_KEY",
    "PERSONA_API_USERNAME",
    "PERSONA_API_PASSWORD",
    "PERSONA_API_TIMEOUT",
    "PERSONA_API_ENABLED",
)


def _clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_are_unconfigured(monkeypatch):
    _clear_env(monkeypatch)
    config = load_prediction_config()
    assert config.base_url == ""
    assert config.token_ttl_seconds == DEFAULT_TOKEN_TTL_SECONDS
    assert not config.is_configured


def test_loads_yaml_section(tmp_path: Path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / "engine.yaml"
    path.write_text(
        "prediction_service:\n"
        "  base_url: https://scores.example.test/\n"
        "  api_key: k\n"
        "  timeout_seconds: 3\n"
    )
    config = load_prediction_config(path)
    assert config.base_url == "https://scores.example.test"
    assert config.api_key == "k"
    assert config.timeout_seconds == 3.0
    assert config.is_configured


def test_env_overrides_yaml(tmp_path: Path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / "engine.yaml"
    path.write_text("prediction_service:\n  base_url: https://file.test\n")
    monkeypatch.setenv("PERSONA_API_URL", "https://env.test")
    monkeypatch.setenv("PERSONA_API_ENABLED", "false")
    config = load_prediction_config(path)
    assert config.base_url == "https://env.test"
    assert not config.is_configured


def test_sample_config_loads(monkeypatch):
    _clear_env(monkeypatch)
    sample = Path(__file__).resolve().parents[1] / "configs" / "persona_engine.yaml"
    config = load_prediction_config(sample)
    assert config.token_ttl_seconds == 3000
    assert not config.is_configured


def test_unknown_yaml_key_raises_clear_error(tmp_path: Path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / "engine.yaml"
    path.write_text("prediction_service:\n  base_url: https://file.test\n  timeout: 5\n")
    with pytest.raises(ValueError, match="Unknown prediction_service config keys.*timeout"):
        load_prediction_config(path)


def test_null_yaml_values_use_defaults(tmp_path: Path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / "engine.yaml"
    path.write_text("prediction_service:\n  base_url: null\n  api_key:\n  timeout_seconds: null\n")
    config = load_prediction_config(path)
    assert config.base_url == ""
    assert config.api_key == ""
    assert config.timeout_seconds == 10.0
    assert not config.is_configured
