"""Logging helpers for the release tooling."""

from __future__ import annotations

import logging
import os
from pathlib import Path


def release_log_paths() -> list[str]:
    log_path = (os.getenv("RELEASE_LOG_PATH") or "").strip()
    if log_path:
        return [log_path]
    return []


def configure_logging(level: int = logging.INFO, log_paths: list[str] | None = None) -> None:
    """Configure default logging if no handlers are present."""
    root = logging.getLogger()
    if root.handlers:
        return
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    for raw in log_paths or []:
        path = Path(raw)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )
