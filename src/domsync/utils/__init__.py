"""Utility modules for domsync.

Provides:
- logger: get_logger for logging
"""

from domsync.utils.logger import get_logger

__all__ = [
    "get_logger",
]
