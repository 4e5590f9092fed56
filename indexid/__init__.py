"""
indexid: durable name-to-id registry

Assigns small, dense integer ids to names and keeps them stable across
process restarts through a flat enum file.

Key components:
- core.handle: IndexId handles and owners
- core.registry: allocation, lookup and removal
- core.errors: error taxonomy
- store: durable enum file
- config: settings for locating the store
"""

from __future__ import annotations

from typing import Optional

__version__ = "1.0.0"
__author__ = "indexid Team"

from indexid.config import RegistrySettings, get_settings
from indexid.core.errors import (
    CapacityExceeded,
    DuplicateRegistration,
    IndexIdError,
    OwnershipConflict,
    PersistenceFailure,
    RegistryInvariantError,
)
from indexid.core.handle import MAX_IDS, NO_OWNER, IndexId, Owner
from indexid.core.registry import IdRegistry
from indexid.store.enum_file import EnumStore


def open_registry(settings: Optional[RegistrySettings] = None) -> IdRegistry:
    """Open the registry at the configured enum file location."""
    settings = settings or get_settings()
    return IdRegistry.open(settings.enum_path)


__all__ = [
    # Handles
    "IndexId",
    "Owner",
    "NO_OWNER",
    "MAX_IDS",
    # Registry
    "IdRegistry",
    "EnumStore",
    "open_registry",
    # Config
    "RegistrySettings",
    "get_settings",
    # Errors
    "IndexIdError",
    "CapacityExceeded",
    "DuplicateRegistration",
    "OwnershipConflict",
    "PersistenceFailure",
    "RegistryInvariantError",
]
