"""
indexid/core/errors.py

Errors raised by the id registry and its durable store.
"""

from __future__ import annotations

from typing import Optional

from indexid.core.handle import Owner


class IndexIdError(Exception):
    """Base class for registry errors."""


class CapacityExceeded(IndexIdError):
    """The number of distinct names would exceed MAX_IDS."""


class DuplicateRegistration(IndexIdError):
    """A live handle already exists for the name."""


class PersistenceFailure(IndexIdError):
    """The enum store could not be written."""


class RegistryInvariantError(IndexIdError):
    """Registry bookkeeping does not match the caller's handle."""


class OwnershipConflict(IndexIdError):
    """
    A name was requested for one owner but is registered for another.

    Attributes:
        name: The contested name
        required_owner: Owner the caller asked for
        actual_owner: Owner recorded at registration
        registration_context: Formatted stack of the original registration
    """

    def __init__(
        self,
        name: str,
        required_owner: Optional[Owner],
        actual_owner: Optional[Owner],
        registration_context: Optional[str] = None,
    ):
        self.name = name
        self.required_owner = required_owner
        self.actual_owner = actual_owner
        self.registration_context = registration_context

        message = (
            f"ID with name '{name}' requested for owner {required_owner} "
            f"but registered for {actual_owner}"
        )
        if registration_context:
            message += f"; registration stack trace:\n{registration_context}"
        else:
            message += " (no registration stack trace)"
        super().__init__(message)
