"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

CONTEXT_PREFIX = "[intake]"


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


# High-level intake-specific logging helpers


def log_document_received(kind: str, language: str, num_lines: int) -> None:
    """Log a newly created raw document."""
    _log_debug(f"Received {kind} ({language}): {num_lines} non-blank lines")


def log_classification_summary(kind: str, role_counts: dict) -> None:
    """
    Log how many lines were assigned to each role.

    Args:
        kind: Document kind value
        role_counts: Mapping of role value -> count
    """
    summary = ", ".join(f"{role}={count}" for role, count in sorted(role_counts.items()))
    _log_debug(f"Classified {kind}: {summary or 'no lines'}")
