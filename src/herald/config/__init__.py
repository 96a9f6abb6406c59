"""Configuration — pydantic-settings models and YAML loading."""

from __future__ import annotations

from herald.config.settings import AppConfig

__all__ = ["AppConfig"]
