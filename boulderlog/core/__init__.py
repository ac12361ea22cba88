"""
Core functionality package.

This package contains core components including:
- Configuration management
- Logging setup
- Exception hierarchy
"""

from boulderlog.core.config import settings

__all__ = [
    # Config
    "settings",
]
