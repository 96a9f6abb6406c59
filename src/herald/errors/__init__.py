"""Errors — HeraldError hierarchy and pre-defined instances."""

from __future__ import annotations

from herald.errors.delivery_errors import (
    DeliveryError,
    SinkError,
    StoreError,
    TemplateNotFoundError,
)
from herald.errors.herald_errors import HeraldError

__all__ = [
    "DeliveryError",
    "HeraldError",
    "SinkError",
    "StoreError",
    "TemplateNotFoundError",
]
