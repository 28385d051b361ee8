"""
Tracking context logger.

Provides logging interface for tracking context with automatic [track] prefix.
All tracking modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from optrack.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[track]"


def setup_tracking_logger(log_dir: Path, store_path: Path = None, console_level: str = "INFO") -> Path:
    """
    Setup logger for tracking context.

    Args:
        log_dir: Directory for this tracking session
        store_path: Key-value store file, recorded in the provenance header
        console_level: Minimum level echoed to stderr

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="track",
        log_dir=log_dir,
        extra_provenance={"Store": store_path} if store_path else None,
        console_level=console_level,
    )


# Wrapper functions with automatic [track] prefix


def _log_info(message: str) -> None:
    """Log info message with [track] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [track] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [track] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [track] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
