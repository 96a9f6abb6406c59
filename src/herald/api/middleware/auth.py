"""API key check for the admin API.

When ``api_key`` is configured, every ``/api`` request must carry it in the
``X-API-Key`` header.  An empty ``api_key`` disables the check.
"""

from __future__ import annotations

import hmac

API_KEY_HEADER = "X-API-Key"


def api_key_valid(expected: str, provided: str | None) -> bool:
    """Constant-time comparison; always valid when no key is configured."""
    if not expected:
        return True
    if not provided:
        return False
    return hmac.compare_digest(expected.encode(), provided.encode())
