"""Application entry point for the herald admin API server."""

from __future__ import annotations

import logging
import os

import uvicorn

from herald.config.settings import AppConfig


def main() -> None:
    """Start the notification service and its admin API.

    ``HERALD_CONFIG_PATH`` may point to a YAML file; environment variables
    still take precedence over it.
    """
    config = AppConfig()
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    reload = os.getenv("HERALD_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "herald.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=reload,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
