"""Custom exceptions for the rendering context."""

from typing import Optional


class MeasurementError(Exception):
    """
    Raised by a text measurer that cannot measure a string.

    The layout engine catches it, measures the line approximately and emits
    it as plain unstyled text.

    Attributes:
        text: The text that could not be measured (truncated for display)
        original_error: The underlying error, if any
    """

    def __init__(self, message: str, text: str = "", original_error: Optional[Exception] = None):
        self.message = message
        self.text = text[:80]
        self.original_error = original_error

        parts = [message]
        if text:
            parts.append(f"Text: {self.text!r}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class ExportError(Exception):
    """
    Raised when neither the styled PDF writer nor the plain fallback could
    produce a document.

    Attributes:
        message: Error description
        styled_error: Failure of the styled writer
        plain_error: Failure of the plain fallback writer
    """

    def __init__(
        self,
        message: str,
        styled_error: Optional[Exception] = None,
        plain_error: Optional[Exception] = None,
    ):
        self.message = message
        self.styled_error = styled_error
        self.plain_error = plain_error

        parts = [message]
        if styled_error:
            parts.append(f"Styled writer: {type(styled_error).__name__}: {styled_error}")
        if plain_error:
            parts.append(f"Plain writer: {type(plain_error).__name__}: {plain_error}")

        super().__init__("\n".join(parts))
