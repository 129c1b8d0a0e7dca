"""
Shared utilities for SCRIBE.

Common functionality used across contexts:
- Logging setup
- Configuration loading
- Timestamps
- Text helpers
"""

from scribe.utils.config_loader import InvalidConfigError, load_config
from scribe.utils.timestamp import today

__all__ = ["InvalidConfigError", "load_config", "today"]
