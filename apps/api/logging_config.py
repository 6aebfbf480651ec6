"""
Logging setup for the Friendly API process.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _parse_level(value: Optional[str]) -> int:
    if not value:
        return logging.INFO
    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, force: bool = False) -> logging.Logger:
    """
    Install console (and optional file) handlers on the root logger.

    When LOG_DIR is configured, each process writes to its own
    ``app_YYYYmmdd_HHMMSS.log`` file inside that directory. SQLAlchemy's
    per-statement INFO output is kept at WARNING so request logs stay readable.
    """
    global _configured
    logger = logging.getLogger("friendly")
    if _configured and not force:
        return logger

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.LOG_LEVEL))
    for handler in list(root.handlers):
        if getattr(handler, "_friendly_handler", False):
            root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._friendly_handler = True  # type: ignore[attr-defined]
    root.addHandler(console)

    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_path = log_dir / f"app_{datetime.now():%Y%m%d_%H%M%S}.log"
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._friendly_handler = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
    return logger
