"""Identifier helpers — random hex ids for jobs, webhooks and schedules."""

from __future__ import annotations

import secrets


def new_id(nbytes: int = 16) -> str:
    """Return a cryptographically random hex id of ``nbytes`` bytes."""
    return secrets.token_hex(nbytes)
