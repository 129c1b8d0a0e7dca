"""
Text processing utilities for formatting and display.
"""

import re
from typing import List


def split_nonblank_lines(text: str) -> List[str]:
    """
    Split text into stripped lines, dropping blank ones.

    Handles \\r\\n and bare \\r line endings.

    Example:
        >>> split_nonblank_lines("A\\r\\n\\n  B  \\n")
        ['A', 'B']
    """
    if not text:
        return []
    lines = re.split(r"\r\n|\r|\n", text)
    return [line.strip() for line in lines if line.strip()]


def alnum_only(text: str) -> str:
    """Lowercase text keeping only letters and digits (any script)."""
    return "".join(c for c in text.lower() if c.isalnum())
