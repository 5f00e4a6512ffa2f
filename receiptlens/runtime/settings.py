"""Service settings loaded from defaults, an optional TOML file and env vars.

Precedence, lowest to highest: built-in defaults, the TOML file, environment
variables.

TOML layout:
    [service]
    endpoint = "https://<resource>.cognitiveservices.azure.com"
    api_key = "..."
    api_version = "2024-11-30"
    poll_interval = 1.0
    poll_timeout = 120.0
    request_timeout = 60.0

    [thresholds]
    high = 0.85
    medium = 0.70
    minimum_field = 0.60
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from receiptlens.receipt.field_mapper import ConfidenceThresholds

DEFAULT_API_VERSION = "2024-11-30"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_POLL_TIMEOUT = 120.0
DEFAULT_REQUEST_TIMEOUT = 60.0

CONFIG_PATH_ENV = "RECEIPTLENS_CONFIG"

# env var -> (section, key)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "AZURE_DOCUMENT_INTELLIGENCE_ENDPOINT": ("service", "endpoint"),
    "AZURE_DOCUMENT_INTELLIGENCE_KEY": ("service", "api_key"),
    "RECEIPTLENS_API_VERSION": ("service", "api_version"),
    "RECEIPTLENS_POLL_INTERVAL": ("service", "poll_interval"),
    "RECEIPTLENS_POLL_TIMEOUT": ("service", "poll_timeout"),
    "RECEIPTLENS_REQUEST_TIMEOUT": ("service", "request_timeout"),
    "RECEIPTLENS_HIGH_CONFIDENCE": ("thresholds", "high"),
    "RECEIPTLENS_MEDIUM_CONFIDENCE": ("thresholds", "medium"),
    "RECEIPTLENS_MIN_FIELD_CONFIDENCE": ("thresholds", "minimum_field"),
}


@dataclass(frozen=True)
class ServiceSettings:
    """Connection and mapping settings for the receipt analyzer."""

    endpoint: str = ""
    api_key: str = field(default="", repr=False)
    api_version: str = DEFAULT_API_VERSION
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: float = DEFAULT_POLL_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    thresholds: ConfidenceThresholds = field(default_factory=ConfidenceThresholds)


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Setting {name!r} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Setting {name!r} must be a number, got {value!r}") from exc


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServiceSettings:
    """
    Build ServiceSettings from the TOML file and environment.

    Args:
        config_path: TOML path override. If None, RECEIPTLENS_CONFIG is used when set.
        environ: Environment mapping, defaults to os.environ

    Returns:
        Frozen settings. Endpoint and key may still be blank here; the
        analyzer rejects blank values when it is constructed.
    """
    env = os.environ if environ is None else environ

    if config_path is None and env.get(CONFIG_PATH_ENV):
        config_path = env[CONFIG_PATH_ENV]

    sections: dict[str, dict[str, Any]] = {"service": {}, "thresholds": {}}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        config = _load_toml(path)
        for section in sections:
            table = config.get(section, {})
            if isinstance(table, dict):
                sections[section].update(table)

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = env.get(env_name)
        if value is not None and value.strip() != "":
            sections[section][key] = value.strip()

    service = sections["service"]
    thresholds = sections["thresholds"]

    return ServiceSettings(
        endpoint=str(service.get("endpoint", "")),
        api_key=str(service.get("api_key", "")),
        api_version=str(service.get("api_version", DEFAULT_API_VERSION)),
        poll_interval=_as_float("poll_interval", service.get("poll_interval", DEFAULT_POLL_INTERVAL)),
        poll_timeout=_as_float("poll_timeout", service.get("poll_timeout", DEFAULT_POLL_TIMEOUT)),
        request_timeout=_as_float("request_timeout", service.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
        thresholds=ConfidenceThresholds(
            high=_as_float("high", thresholds.get("high", ConfidenceThresholds.high)),
            medium=_as_float("medium", thresholds.get("medium", ConfidenceThresholds.medium)),
            minimum_field=_as_float(
                "minimum_field", thresholds.get("minimum_field", ConfidenceThresholds.minimum_field)
            ),
        ),
    )
