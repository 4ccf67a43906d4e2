"""
Run the API with uvicorn: ``python -m taskapi``.
"""

from __future__ import annotations

import logging

import uvicorn

from taskapi.app import create_app
from taskapi.core.config import ConfigurationError, get_settings
from taskapi.core.logging_setup import setup_logging

logger = logging.getLogger("taskapi")


def main() -> None:
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        raise SystemExit(f"Configuration error: {exc}") from exc

    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server running on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
