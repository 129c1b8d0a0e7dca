"""Timestamp formatting utilities."""

from datetime import date
from typing import Optional


def today(on_date: Optional[date] = None) -> str:
    """
    Date stamp used in generated file names.

    Args:
        on_date: Date to format (default: current local date)

    Returns:
        Date formatted as YYYY-MM-DD

    Example:
        >>> today(date(2024, 1, 31))
        '2024-01-31'
    """
    return (on_date or date.today()).isoformat()
