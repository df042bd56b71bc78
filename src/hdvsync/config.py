"""Configuration management for hdvsync.

Supports loading configuration from:
1. Environment variables (HDVSYNC_*)
2. Config file (~/.hdvsync/config.yaml)
3. Default values

Example config file (~/.hdvsync/config.yaml):
    update:
      safe_update: true
      max_sidecar_mb: 100
    logging:
      level: "INFO"
      format: "json"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# Config file search locations (in priority order)
CONFIG_LOCATIONS = [
    Path.home() / ".hdvsync" / "config.yaml",
    Path.home() / ".config" / "hdvsync" / "config.yaml",
    Path(".hdvsync.yaml"),
]


@dataclass
class UpdateConfig:
    """Sidecar update configuration."""

    safe_update: bool = True
    max_sidecar_mb: int = 100

    @property
    def max_sidecar_bytes(self) -> int:
        return self.max_sidecar_mb * 1024 * 1024


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "console"  # "console" or "json"


@dataclass
class HDVSyncConfig:
    """Main configuration for hdvsync."""

    update: UpdateConfig = field(default_factory=UpdateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _load_yaml_config() -> dict[str, Any]:
    """Load configuration from the first YAML file found."""
    for config_path in CONFIG_LOCATIONS:
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f)
                    return data if isinstance(data, dict) else {}
            except (OSError, yaml.YAMLError):
                continue
    return {}


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with HDVSYNC_ prefix."""
    return os.environ.get(f"HDVSYNC_{key}", default)


def _parse_bool(value: str | None) -> bool | None:
    """Parse boolean from string."""
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes", "on")


def load_config() -> HDVSyncConfig:
    """Load configuration from file and environment variables.

    Priority (highest first):
    1. Environment variables (HDVSYNC_*)
    2. Config file (~/.hdvsync/config.yaml)
    3. Default values
    """
    file_config = _load_yaml_config()

    # Update config
    update_config = file_config.get("update") or {}
    safe_env = _parse_bool(_get_env("SAFE_UPDATE"))
    update = UpdateConfig(
        safe_update=(
            safe_env if safe_env is not None else bool(update_config.get("safe_update", True))
        ),
        max_sidecar_mb=int(
            _get_env("MAX_SIDECAR_MB") or update_config.get("max_sidecar_mb", 100)
        ),
    )

    # Logging config
    logging_config = file_config.get("logging") or {}
    logging = LoggingConfig(
        level=str(_get_env("LOG_LEVEL") or logging_config.get("level", "WARNING")).upper(),
        format=str(_get_env("LOG_FORMAT") or logging_config.get("format", "console")).lower(),
    )

    return HDVSyncConfig(update=update, logging=logging)


# Global config instance (lazy loaded)
_config: HDVSyncConfig | None = None


def get_config() -> HDVSyncConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
