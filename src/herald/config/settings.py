"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``HERALD_``, nested via ``__``)
2. YAML config file (``HERALD_CONFIG_PATH`` env var or ``AppConfig.from_yaml``)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class StoreEngine(enum.StrEnum):
    """Supported configuration store backends."""

    MEMORY = "memory"
    JSON = "json"
    REDIS = "redis"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP admin API server settings."""

    model_config = SettingsConfigDict(
        env_prefix="HERALD_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3001


class NotificationConfig(BaseSettings):
    """Queue processing and rendering settings."""

    model_config = SettingsConfigDict(
        env_prefix="HERALD_NOTIFICATIONS__",
        case_sensitive=False,
    )

    tick_interval: float = Field(default=5.0, gt=0, description="Seconds between queue ticks")
    batch_size: int = Field(default=10, ge=1, description="Max jobs drained per tick")
    max_retries: int = Field(default=3, ge=0, description="Job-level retries before drop")
    send_timeout: float = Field(default=10.0, gt=0, description="Per-send deadline in seconds")
    field_value_limit: int = Field(default=1024, ge=4)
    job_id_bytes: int = 16
    webhook_id_bytes: int = 8
    webhook_display_name: str = "Herald Notifications"
    webhook_avatar_url: str = ""


class DiscordConfig(BaseSettings):
    """Chat platform (Discord REST) settings used by the channel sink."""

    model_config = SettingsConfigDict(
        env_prefix="HERALD_DISCORD__",
        case_sensitive=False,
    )

    api_url: str = "https://discord.com/api/v10"
    bot_token: str = ""


class StoreConfig(BaseSettings):
    """Configuration store settings."""

    model_config = SettingsConfigDict(
        env_prefix="HERALD_STORE__",
        case_sensitive=False,
    )

    engine: StoreEngine = Field(
        default=StoreEngine.JSON,
        description="Store backend: memory, json or redis",
    )
    path: str = "./data"
    redis_url: str = "redis://localhost:6379/0"
    key: str = "notifications"


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="HERALD_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``HERALD_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="HERALD_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    api_key: str = ""
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    discord: DiscordConfig = Field(default_factory=DiscordConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
