"""Tests for the configuration system."""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from herald.config.settings import (
    AppConfig,
    DiscordConfig,
    MetricsConfig,
    NotificationConfig,
    ServerConfig,
    StoreConfig,
    StoreEngine,
    _load_yaml,
)

if TYPE_CHECKING:
    from pathlib import Path

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    """Verify the default values."""

    def test_server_defaults(self) -> None:
        cfg = ServerConfig()
        assert cfg.host == "0.0.0.0"  # noqa: S104
        assert cfg.port == 3001

    def test_notification_defaults(self) -> None:
        cfg = NotificationConfig()
        assert cfg.tick_interval == 5.0
        assert cfg.batch_size == 10
        assert cfg.max_retries == 3
        assert cfg.send_timeout == 10.0
        assert cfg.field_value_limit == 1024
        assert cfg.job_id_bytes == 16
        assert cfg.webhook_id_bytes == 8

    def test_discord_defaults(self) -> None:
        cfg = DiscordConfig()
        assert cfg.api_url == "https://discord.com/api/v10"
        assert cfg.bot_token == ""

    def test_store_defaults(self) -> None:
        cfg = StoreConfig()
        assert cfg.engine == StoreEngine.JSON
        assert cfg.path == "./data"
        assert cfg.key == "notifications"

    def test_metrics_defaults(self) -> None:
        assert MetricsConfig().enabled is True

    def test_app_config_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.debug is False
        assert cfg.api_key == ""
        assert isinstance(cfg.notifications, NotificationConfig)
        assert isinstance(cfg.store, StoreConfig)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_store_engine_redis(self) -> None:
        assert StoreConfig(engine="redis").engine == StoreEngine.REDIS

    def test_store_engine_invalid(self) -> None:
        with pytest.raises(ValidationError):
            StoreConfig(engine="sqlite")

    def test_batch_size_positive(self) -> None:
        with pytest.raises(ValidationError):
            NotificationConfig(batch_size=0)

    def test_max_retries_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            NotificationConfig(max_retries=-1)


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


class TestEnv:
    def test_top_level_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HERALD_DEBUG", "true")
        monkeypatch.setenv("HERALD_API_KEY", "secret")
        cfg = AppConfig()
        assert cfg.debug is True
        assert cfg.api_key == "secret"

    def test_nested_env_via_delimiter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HERALD_SERVER__PORT", "8080")
        assert AppConfig().server.port == 8080

    def test_nested_notifications_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HERALD_NOTIFICATIONS__BATCH_SIZE", "25")
        monkeypatch.setenv("HERALD_NOTIFICATIONS__WEBHOOK_DISPLAY_NAME", "Status Bot")
        cfg = AppConfig()
        assert cfg.notifications.batch_size == 25
        assert cfg.notifications.webhook_display_name == "Status Bot"

    def test_nested_store_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HERALD_STORE__ENGINE", "redis")
        monkeypatch.setenv("HERALD_STORE__REDIS_URL", "redis://cache:6379/2")
        cfg = AppConfig()
        assert cfg.store.engine == StoreEngine.REDIS
        assert cfg.store.redis_url == "redis://cache:6379/2"


# ---------------------------------------------------------------------------
# YAML
# ---------------------------------------------------------------------------


class TestYAML:
    """YAML config file loading."""

    def test_load_yaml_nonexistent(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_load_yaml_empty_file(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.yaml"
        f.write_text("")
        assert _load_yaml(f) == {}

    def test_load_yaml_non_dict(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- maintenance\n- security\n")
        assert _load_yaml(f) == {}

    def test_from_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "herald.yaml"
        f.write_text(
            textwrap.dedent("""\
                debug: true
                notifications:
                  tick_interval: 2.5
                  max_retries: 5
                store:
                  engine: memory
            """)
        )
        cfg = AppConfig.from_yaml(f)
        assert cfg.debug is True
        assert cfg.notifications.tick_interval == 2.5
        assert cfg.notifications.max_retries == 5
        assert cfg.store.engine == StoreEngine.MEMORY

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        f = tmp_path / "herald.yaml"
        f.write_text("api_key: from_yaml\n")
        monkeypatch.setenv("HERALD_API_KEY", "from_env")
        assert AppConfig.from_yaml(f).api_key == "from_env"
