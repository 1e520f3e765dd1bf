"""
Generic loguru setup shared by the SNAS contexts.

Context-specific wrappers (with [intake], [target], [content] prefixes) live in
contexts/{context}/logger.py and should be used instead of this module directly.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from snas import __version__

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: dict = None,
    console_level: str = "INFO",
) -> Optional[Path]:
    """
    Configure loguru for a context with provenance tracking.

    Always logs to stdout at console_level. When log_dir is given, also writes a
    DEBUG-level file {log_dir}/{context_name}.log.

    Args:
        context_name: Context identifier (e.g., "intake", "target", "content")
        log_dir: Directory for this logging session (None for console only)
        extra_provenance: Additional key-value pairs for provenance header
        console_level: Minimum level shown on the console

    Returns:
        Path to log file, or None when logging to console only

    Example:
        from snas.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="intake",
            log_dir=Path("outs/logs/import_20251114_123456"),
            extra_provenance={"Source": "achievements.csv"},
        )
    """
    logger.remove()

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        log_file = log_dir / f"{context_name}.log"
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG")

    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """
    Log execution provenance (script, command, working directory, versions).

    Args:
        extra_context: Additional key-value pairs to log
    """
    logger.info("=" * 80)
    logger.info(f"Script: {sys.argv[0]}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")
    logger.info(f"SNAS: {__version__}")

    if extra_context:
        for key, value in extra_context.items():
            logger.info(f"{key}: {value}")

    logger.info("=" * 80)
