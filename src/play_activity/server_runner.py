"""Helpers to launch the local play history API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import uvicorn

from .config import PlayLogSettings
from .paths import get_play_log_path
from .webapp import create_app


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    log_path: Optional[Path] = None,
    settings: Optional[PlayLogSettings] = None,
    log_level: str = "info",
) -> None:
    """Start the FastAPI application with uvicorn."""
    app = create_app(
        log_path=log_path or get_play_log_path(),
        settings=settings or PlayLogSettings(),
    )

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)
