"""Configuration module using Pydantic Settings.

Usage:
    from treesync.config import SyncSettings

    settings = SyncSettings(authoritative=False)
"""

from treesync.config.settings import SyncSettings

__all__ = [
    "SyncSettings",
]
