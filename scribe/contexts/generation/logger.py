"""
Generation context logger.

Provides logging interface for generation context with automatic [generate] prefix.
All generation modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[generate]"


def _log_info(message: str) -> None:
    """Log info message with [generate] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [generate] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [generate] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [generate] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level generation-specific logging helpers


def log_retry(message: str, delay: float, attempt: int, max_retries: int) -> None:
    """Log a transient provider error that will be retried."""
    _log_warning(f"{message}, retrying in {delay:.1f}s... (attempt {attempt}/{max_retries})")


def log_llm_response(provider_name: str, input_tokens: int, output_tokens: int) -> None:
    """Log token usage of one provider call."""
    _log_debug(f"{provider_name}: {input_tokens} input / {output_tokens} output tokens")


def log_draft_received(kind: str, language: str, num_chars: int) -> None:
    """Log a drafted document."""
    _log_info(f"Drafted {kind} ({language}): {num_chars} characters")


def log_generation_failure(error: Exception) -> None:
    _log_error(f"Generation failed: {type(error).__name__}: {error}")
