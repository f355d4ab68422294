"""relayer_api configuration from environment variables or YAML."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

_TRUE_VALUES = ("1", "true", "yes", "on")


def _parse_bool(value: Union[str, bool]) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class RelayerApiConfig:
    """Schema layer configuration.

    Load from environment using RelayerApiConfig.from_env() or from a YAML
    file using load_config(). Environment variables win over file values.
    """

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Run Event.validate() on each event when building publish requests
    validate_events: bool = True

    @classmethod
    def from_env(cls) -> "RelayerApiConfig":
        """Load configuration from environment variables.

        Optional environment variables (with defaults):
            RELAYER_API_LOG_LEVEL: INFO (default)
            RELAYER_API_LOG_JSON: false (default)
            RELAYER_API_VALIDATE_EVENTS: true (default)
        """
        return cls(
            log_level=os.getenv("RELAYER_API_LOG_LEVEL", "INFO").upper(),
            log_json=_parse_bool(os.getenv("RELAYER_API_LOG_JSON", "false")),
            validate_events=_parse_bool(
                os.getenv("RELAYER_API_VALIDATE_EVENTS", "true")
            ),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RelayerApiConfig":
        """Build configuration from a plain dict (e.g. parsed YAML).

        Raises:
            ValueError: If the dict contains unknown keys
        """
        known = {"log_level", "log_json", "validate_events"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        defaults = cls()
        return cls(
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
            log_json=_parse_bool(data.get("log_json", defaults.log_json)),
            validate_events=_parse_bool(
                data.get("validate_events", defaults.validate_events)
            ),
        )


def load_config(path: Optional[Path] = None) -> RelayerApiConfig:
    """
    Load configuration from an optional YAML file, then apply env overrides.

    The YAML file may hold the settings at top level or under a
    ``relayer_api`` key.

    Args:
        path: YAML file path; when None only the environment is read

    Returns:
        RelayerApiConfig instance
    """
    data: Dict[str, Any] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        data = loaded.get("relayer_api", loaded)

    config = RelayerApiConfig.from_dict(data)

    if "RELAYER_API_LOG_LEVEL" in os.environ:
        config.log_level = os.environ["RELAYER_API_LOG_LEVEL"].upper()
    if "RELAYER_API_LOG_JSON" in os.environ:
        config.log_json = _parse_bool(os.environ["RELAYER_API_LOG_JSON"])
    if "RELAYER_API_VALIDATE_EVENTS" in os.environ:
        config.validate_events = _parse_bool(os.environ["RELAYER_API_VALIDATE_EVENTS"])

    return config
