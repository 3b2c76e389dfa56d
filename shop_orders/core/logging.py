"""
Central logging setup for the order service.

Every entry point (CLI, scripts) calls ``configure_logging()`` once; modules
only ever do ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from shop_orders.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s"


def configure_logging(level: str | None = None, log_file: Path | None = None) -> None:
    """
    Configures the root logger.

    Output always goes to stderr so the CLI can keep stdout for JSON; when a
    log file is configured (argument or ``SO_LOG_FILE``) records are also
    appended there. Calling it again replaces the handlers.
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    target_file = log_file or settings.log_file

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if target_file is not None:
        handlers.append(logging.FileHandler(target_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Statement echo is noise at INFO.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
