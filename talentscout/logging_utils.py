"""Structured logging helper shared by the scraping and enrichment services."""

from __future__ import annotations

import logging
from typing import Any


def structured_log(
    logger: logging.Logger,
    level: str,
    event: str,
    /,
    **fields: Any,
) -> None:
    """Emit a structured log entry.

    The dotted event name is the log message; keyword fields travel as
    ``extra`` and are rendered by the formatters in ``logging_config``.

    Usage:
        structured_log(logger, "info", "fetch_scheduler.batch_completed", batch_index=0, batch_size=3)
    """
    log_method = getattr(logger, level.lower())
    log_method(event, extra=fields)
