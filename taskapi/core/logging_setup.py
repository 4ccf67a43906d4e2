from __future__ import annotations

import logging
import sys

_NOISY = ("uvicorn.access", "aiosqlite", "sqlalchemy.engine", "httpx")


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the root logger with a single stdout handler.

    Call this once, before the application starts serving.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
        force=True,
    )
    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)
