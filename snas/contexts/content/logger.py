"""
Content context logger.

Provides logging interface for content context with automatic [content] prefix.
All content modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from snas.utils.errors import ErrorKind
from snas.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[content]"


def setup_content_logger(log_dir: Optional[Path] = None, ai_enabled: bool = False) -> Optional[Path]:
    """Setup logger for content context."""
    return _setup_logger(
        context_name="content",
        log_dir=log_dir,
        extra_provenance={"AI backend": "enabled" if ai_enabled else "disabled (fallback only)"},
    )


# Wrapper functions with automatic [content] prefix


def _log_info(message: str) -> None:
    """Log info message with [content] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [content] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [content] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [content] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [content] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level content-specific logging helpers


def log_ai_fallback(achievement_name: str, reason: str) -> None:
    """Note that AI content was unavailable and fallback templates were used."""
    _log_warning(
        f"{ErrorKind.EXTERNAL_SERVICE_UNAVAILABLE.value}: AI content unavailable for "
        f"'{achievement_name}' ({reason}); using fallback templates"
    )


def log_cache_failure(operation: str, key: str, error: Exception) -> None:
    _log_warning(f"Cache {operation} failed for {key}: {error}")


def log_generation_result(
    content_type: str, count: int, processing_time_ms: int, cache_hit: bool, sla_compliant: bool
) -> None:
    source = "cache" if cache_hit else "generated"
    message = f"{count} {content_type} suggestion(s) ({source}, {processing_time_ms} ms)"
    if sla_compliant:
        _log_debug(message)
    else:
        _log_warning(f"{message} exceeded SLA")
