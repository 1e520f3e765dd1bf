"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from snas.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Optional[Path] = None, audience: str = "default") -> Optional[Path]:
    """Setup logger for targeting context."""
    return _setup_logger(
        context_name="target",
        log_dir=log_dir,
        extra_provenance={"Audience": audience},
    )


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [target] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_prioritization_result(total: int, processing_time_ms: int, sla_compliant: bool) -> None:
    if sla_compliant:
        _log_success(f"Prioritized {total} achievements ({processing_time_ms} ms)")
    else:
        log_sla_exceeded("Badge prioritization", processing_time_ms)


def log_sla_exceeded(operation: str, processing_time_ms: int) -> None:
    """Warn that an operation exceeded its SLA (advisory only)."""
    _log_warning(f"{operation} exceeded SLA: {processing_time_ms} ms")
