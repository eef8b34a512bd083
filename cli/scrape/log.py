from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_ENV = "SCRAPE_LOG"


def resolve_level(quiet: bool = False, env_value: Optional[str] = None) -> int:
    """日志级别取自 SCRAPE_LOG（默认 warning），--quiet 时只保留错误"""
    if quiet:
        return logging.ERROR
    name = (env_value if env_value is not None else os.environ.get(LOG_ENV, "")).strip().upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(quiet: bool = False, console: Optional[Console] = None) -> logging.Logger:
    logger = logging.getLogger("scrape")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(quiet))
    return logger
