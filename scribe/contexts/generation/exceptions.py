"""Custom exceptions for the generation context."""

from typing import Optional


class GenerationError(Exception):
    """
    Raised when drafting a document through the generate collaborator fails.

    Attributes:
        message: Error description
        provider_name: Provider that was called, if known
        original_error: The underlying error
        raw: The RawDocument that was drafted, when the failure came after drafting
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        raw=None,
    ):
        self.message = message
        self.provider_name = provider_name
        self.original_error = original_error
        self.raw = raw

        parts = [message]
        if provider_name:
            parts.append(f"Provider: {provider_name}")
        if original_error:
            parts.append(f"Original error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))
