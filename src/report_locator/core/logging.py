"""Logging setup for report-locator.

Workflow state changes, geocoder failures and manual entries are logged to
stderr, never stdout, so ``--json`` command output stays machine-readable.
Records bound with ``json_output=True`` are serialized as JSON lines for log
shippers. Setting ``LOG_DIR`` also keeps a rotating ``report-locator.log``.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace all Loguru sinks with the report-locator ones.

    Called once per CLI invocation; calling it again resets the sinks.

    Args:
        log_level: Minimum level, case-insensitive (``"info"`` works).
        log_dir: Directory for ``report-locator.log``, created if missing.
            The file rotates daily and is kept for a week.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=_LOG_FORMAT,
        serialize=False,
        filter=lambda record: not record["extra"].get("json_output", False),
    )
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        serialize=True,
        filter=lambda record: record["extra"].get("json_output", False),
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "report-locator.log",
            level=log_level.upper(),
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )
