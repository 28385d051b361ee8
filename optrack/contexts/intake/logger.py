"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from optrack.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path, proxy_base: str = None, console_level: str = "INFO") -> Path:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this intake session
        proxy_base: Read proxy in use, recorded in the provenance header
        console_level: Minimum level echoed to stderr

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={"Read proxy": proxy_base} if proxy_base else None,
        console_level=console_level,
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_extraction_result(source_url: str, fields: dict) -> None:
    """Log which fields heuristic extraction filled for a page."""
    found = [name for name, value in fields.items() if value]
    missing = [name for name, value in fields.items() if not value]
    _log_info(f"Extracted {len(found)}/{len(fields)} field(s) from {source_url}")
    if found:
        _log_debug(f"  Found: {', '.join(found)}")
    if missing:
        _log_debug(f"  Missing: {', '.join(missing)}")
