"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
process-wide registry.

Usage:
    from treesync.config import SyncSettings

    # Load from environment variables (TREESYNC_*)
    settings = SyncSettings()

    # Or override with explicit values
    settings = SyncSettings(authoritative=False)
"""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for a synchronized tree process.

    Attributes:
        authoritative: Whether this process generates identifiers and accepts
            gated mutations. Observers leave it off and receive identifiers
            through snapshots.
        evict_on_remove: Unregister a removed model (and its subtree) from
            the registry once it leaves its collection.
        id_source: Identifier strategy for the default registry.
        id_prefix: Prefix for sequential identifiers.

    Environment Variables:
        TREESYNC_AUTHORITATIVE
        TREESYNC_EVICT_ON_REMOVE
        TREESYNC_ID_SOURCE
        TREESYNC_ID_PREFIX
    """

    model_config = SettingsConfigDict(
        env_prefix="TREESYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    authoritative: bool = True
    evict_on_remove: bool = True
    id_source: Literal["uuid", "sequential"] = "uuid"
    id_prefix: str = ""
