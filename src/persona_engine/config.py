# ABOUTME: Loads prediction-service settings from YAML with environment overrides.
# ABOUTME: An unconfigured service keeps the engine in fully local mode.

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_TOKEN_TTL_SECONDS = 50 * 60


@dataclass
class PredictionServiceConfig:
    """Connection settings for the remote score prediction service."""

    base_url: str = ""
    api_key: str = ""
    username: str = ""
    password: str = ""
    timeout_seconds: float = 10.0
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    enabled: bool = True

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.base_url)


def load_prediction_config(path: Optional[Path] = None) -> PredictionServiceConfig:
    """
    Build the prediction-service config.

    Values come from the ``prediction_service`` section of the YAML file (if
    given), then ``PERSONA_API_*`` environment variables override them. Null
    YAML values fall back to the defaults; unknown keys raise ``ValueError``.
    """

    values = {}
    if path is not None:
        with open(path) as f:
            cfg = yaml.safe_load(f) or {}
        section = cfg.get("prediction_service") or {}
        known = {field.name for field in fields(PredictionServiceConfig)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ValueError(f"Unknown prediction_service config keys in {path}: {', '.join(unknown)}")
        values.update({key: value for key, value in section.items() if value is not None})

    config = PredictionServiceConfig(**values)

    config.base_url = (os.getenv("PERSONA_API_URL", config.base_url) or "").rstrip("/")
    config.api_key = os.getenv("PERSONA_API_KEY", config.api_key)
    config.username = os.getenv("PERSONA_API_USERNAME", config.username)
    config.password = os.getenv("PERSONA_API_PASSWORD", config.password)
    config.timeout_seconds = float(os.getenv("PERSONA_API_TIMEOUT", config.timeout_seconds))
    enabled = os.getenv("PERSONA_API_ENABLED")
    if enabled is not None:
        config.enabled = enabled.lower() == "true"
    return config
