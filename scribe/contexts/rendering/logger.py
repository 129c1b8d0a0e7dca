"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from scribe.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path = None, style_name: str = None) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        style_name: Style profile recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from scribe.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir, style_name="modern")
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"Style": style_name} if style_name else None,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_degradation(message: str) -> None:
    """Log a recoverable rendering problem (fallback measurement, truncation, ...)."""
    _log_warning(message)


def log_pagination_result(kind: str, result) -> None:
    """
    Log pagination summary.

    Args:
        kind: Document kind value, or "plain"
        result: PaginationResult
    """
    _log_debug(
        f"Paginated {kind} with style '{result.style_name}': {result.page_count} page(s), "
        f"{result.command_count} draw commands"
    )
    if result.truncated_lines:
        _log_warning(f"{result.truncated_lines} line(s) did not fit and were truncated")


def log_pagination_failure(kind: str, error: Exception) -> None:
    """Log an unexpected layout failure that was replaced by a placeholder page."""
    _log_error(f"Pagination of {kind} failed, emitting placeholder page: {type(error).__name__}: {error}")


def log_export_result(filename: str, result, verbose: bool = False) -> None:
    """
    Log export result with warnings.

    Args:
        filename: Derived file name
        result: ExportResult
        verbose: Show every warning (default: first 3)
    """
    mode = "plain" if result.plain else "styled"
    _log_success(f"Exported {filename}: {result.page_count} page(s), {len(result.data)} bytes ({mode})")

    warning_limit = len(result.warnings) if verbose else 3
    for i, warning in enumerate(result.warnings[:warning_limit], 1):
        _log_debug(f"  Warning {i}: {warning}")
    if len(result.warnings) > warning_limit:
        _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")


def log_validation_result(result) -> None:
    """Log PDF read-back validation result."""
    if result.is_valid:
        _log_success(f"Validation passed: {result.page_count} page(s)")
    else:
        _log_error(f"Validation failed with {len(result.issues)} issue(s)")
        for issue in result.issues:
            _log_error(f"  {issue}")
