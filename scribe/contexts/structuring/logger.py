"""
Structuring context logger.

Provides logging interface for structuring context with automatic [structure] prefix.
All structuring modules should import from this module, not from utils.logger directly.
"""

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

CONTEXT_PREFIX = "[structure]"


def _log_info(message: str) -> None:
    """Log info message with [structure] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [structure] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [structure] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_assembly_result(document) -> None:
    """
    Log a one-line summary of an assembled document.

    Args:
        document: ResumeDocument or CoverLetterDocument
    """
    kind = document.kind.value
    if kind == "resume":
        names = [section.name for section in document.sections]
        _log_debug(
            f"Assembled resume '{document.name or '(no name)'}': "
            f"{len(document.contact)} contact lines, sections={names}"
        )
    else:
        _log_debug(
            f"Assembled {kind}: {len(document.body.paragraphs)} paragraphs, "
            f"salutation={'yes' if document.body.salutation else 'no'}, "
            f"closing={'yes' if document.body.closing else 'no'}"
        )


def log_assembly_failure(kind: str, error: Exception) -> None:
    """Log an unexpected failure that was turned into an empty document."""
    _log_error(f"Assembly of {kind} failed, returning empty document: {type(error).__name__}: {error}")
