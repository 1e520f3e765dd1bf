"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from snas.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Optional[Path] = None, source: str = "records") -> Optional[Path]:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this import session (None for console only)
        source: Description of the import source for provenance

    Returns:
        Path to log file, or None when logging to console only
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={"Source": source},
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_import_start(total_records: int, batch_size: int, validate_only: bool) -> None:
    """Log start of an import run."""
    mode = "validation only" if validate_only else "import"
    _log_info(f"Starting achievement {mode}: {total_records} records, batch size {batch_size}")


def log_batch_progress(batch_number: int, total_batches: int) -> None:
    _log_info(f"Processed batch {batch_number} of {total_batches}")


def log_import_result(result) -> None:
    """
    Log import result with statistics.

    Args:
        result: ImportResult from AchievementLoader.populate_achievement_data()
    """
    stats = (
        f"imported: {result.successful_imports}, failed: {result.failed_imports}, "
        f"duplicates skipped: {result.duplicates_skipped}"
    )

    if not result.success:
        _log_error(f"{result.message} ({result.processing_time_ms} ms)")
    elif result.failed_imports:
        _log_warning(f"{result.message} with failures ({stats}, {result.processing_time_ms} ms)")
    else:
        _log_success(f"{result.message} ({stats}, {result.processing_time_ms} ms)")

    for error in result.errors:
        _log_debug(f"  {error}")
