"""
Shared loguru setup for OPTRACK contexts.

Each context logs to its own daily file under the log directory
({context}_{YYYYMMDD}.log) and echoes to stderr above a configurable level.
Context-specific wrappers live in contexts/{context}/logger.py.
"""

import sys
from datetime import date
from pathlib import Path

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<level>{level: <7}</level> | <level>{message}</level>"

# Console colors that differ from loguru's defaults
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    console_level: str = "INFO",
    retention: str = "30 days",
) -> Path:
    """
    Replace all loguru sinks with a daily context file and a stderr echo.

    Safe to call more than once per process; every call starts from a clean
    set of sinks, so repeated CLI invocations in one interpreter do not stack
    handlers.

    Args:
        context_name: Context identifier (e.g., "intake", "track")
        log_dir: Directory holding the daily log files (``~`` is expanded)
        extra_provenance: Additional key-value pairs for the session header
        console_level: Minimum level echoed to stderr
        retention: How long loguru keeps old log files

    Returns:
        Path to today's log file for this context
    """
    log_dir = Path(log_dir).expanduser()
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}_{date.today():%Y%m%d}.log"

    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", retention=retention)
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_session_header(context_name, extra_provenance)

    return log_file


def log_session_header(context_name: str, extra_context: dict = None) -> None:
    """Write the invoking command and environment to the file sink only."""
    logger.debug("=" * 80)
    logger.debug(f"Context: {context_name}")
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
