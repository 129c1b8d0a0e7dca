"""
PDF reading utilities for read-back checks of generated documents.

Functions accept a path or the raw PDF bytes, so a freshly exported
document can be inspected without touching the filesystem.

Helper functions:
    page_count: Quick page count without full extraction.
    extract_text: Full text of every page.
    extract_lines: Text lines rebuilt from characters by Y-clustering.
    normalize_for_matching: Text normalization for fuzzy matching.
    cluster_by_y_tolerance: Y-coordinate clustering for line detection.
"""

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import pdfplumber
from PyPDF2 import PdfReader

PDFSource = Union[bytes, str, Path]


def _open_source(pdf: PDFSource) -> Union[BinaryIO, str]:
    """File-like object for bytes, string path otherwise."""
    if isinstance(pdf, (bytes, bytearray)):
        return BytesIO(bytes(pdf))
    return str(pdf)


def page_count(pdf: PDFSource) -> Optional[int]:
    """Get page count from PDF, or None if unreadable."""
    try:
        reader = PdfReader(_open_source(pdf))
        return len(reader.pages)
    except Exception:
        return None


def normalize_for_matching(text: str) -> str:
    """Keep only lowercase alphanumeric characters for fuzzy text matching."""
    return "".join(c for c in text.lower() if c.isalnum())


def extract_text(pdf: PDFSource, max_pages: int = 100) -> str:
    """
    Extract the text of every page, pages separated by newlines.

    Raises:
        pdfplumber / pdfminer errors for unreadable input
    """
    with pdfplumber.open(_open_source(pdf)) as document:
        return "\n".join(page.extract_text() or "" for page in document.pages[:max_pages])


def cluster_by_y_tolerance(chars: List, tolerance: float = 3.0) -> List[List]:
    """
    Group characters into lines by Y-coordinate proximity.

    Handles baseline shifts between bold/regular text that would otherwise split lines.
    """
    if not chars:
        return []

    sorted_chars = sorted(chars, key=lambda c: c["top"])

    lines = []
    current_line = [sorted_chars[0]]
    current_y = sorted_chars[0]["top"]

    for char in sorted_chars[1:]:
        if abs(char["top"] - current_y) <= tolerance:
            current_line.append(char)
        else:
            lines.append(current_line)
            current_line = [char]
            current_y = char["top"]

    if current_line:
        lines.append(current_line)

    return lines


def extract_lines(pdf: PDFSource, page: int = 1, y_tolerance: float = 3.0) -> List[str]:
    """
    Text lines of one page (1-indexed), top to bottom, characters sorted by X.

    Returns:
        List of lines; empty if the page doesn't exist
    """
    with pdfplumber.open(_open_source(pdf)) as document:
        if page < 1 or page > len(document.pages):
            return []
        chars = document.pages[page - 1].chars

    lines = []
    for char_objs in cluster_by_y_tolerance(chars, tolerance=y_tolerance):
        char_objs.sort(key=lambda c: c["x0"])
        lines.append("".join(c["text"] for c in char_objs))
    return lines
