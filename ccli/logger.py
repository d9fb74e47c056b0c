"""
Package logger.

The library never configures handlers; hosts opt in with the standard logging
machinery, e.g. logging.basicConfig(level=logging.DEBUG).
"""
import logging

logger = logging.getLogger("ccli")

__all__ = (
    "logger",
)
