"""
indexid/core/registry.py

ID registry mapping names to small, dense, durable integer ids.

Ids are persisted through an EnumStore so a name keeps its id across
restarts. A name's id is never handed to a different name, even after
its live handle is unregistered.
"""

from __future__ import annotations

import logging
import threading
import traceback
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np

from indexid.core.errors import (
    CapacityExceeded,
    DuplicateRegistration,
    OwnershipConflict,
    PersistenceFailure,
    RegistryInvariantError,
)
from indexid.core.handle import MAX_IDS, NO_OWNER, IndexId, Owner
from indexid.store.enum_file import EnumStore

logger = logging.getLogger(__name__)


class IdRegistry:
    """
    Registry for allocating and looking up ids by name.

    Construction loads the enum store; there is no teardown.

    Attributes:
        store: Durable enum store backing the name -> id map
    """

    def __init__(self, store: EnumStore):
        self.store = store

        # Guards _name_to_id and every store access
        self._names_lock = threading.Lock()
        # Guards the live, owner and context tables together
        self._lock = threading.RLock()

        self._name_to_id: Dict[str, int] = {}
        self._by_id: Dict[int, IndexId] = {}
        self._owners: Dict[int, Optional[Owner]] = {}
        self._contexts: Dict[int, traceback.StackSummary] = {}

        with self._names_lock:
            self._name_to_id = self.store.load()
        logger.debug("Loaded %d names from %s", len(self._name_to_id), self.store.path)

    @classmethod
    def open(cls, path: Union[str, Path]) -> "IdRegistry":
        """Open a registry backed by the enum file at *path*."""
        return cls(EnumStore(path))

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        owner: Optional[Owner] = NO_OWNER,
        *,
        check_owner: bool = True,
        exclusive: bool = False,
    ) -> IndexId:
        """
        Get or create the handle for *name*.

        Args:
            name: Name to register
            owner: Registering component
            check_owner: Reject a live handle held by a different owner
            exclusive: Reject any live handle for the name

        Returns:
            The unique handle for the name

        Raises:
            CapacityExceeded: If a new id would exceed MAX_IDS
            DuplicateRegistration: If exclusive and the name is live
            OwnershipConflict: If check_owner and the owners differ
            PersistenceFailure: If a new id could not be persisted
        """
        _validate_name(name)
        with self._lock:
            live = self.find_by_name(name, check_owner=check_owner, required_owner=owner)
            if live is not None:
                if exclusive:
                    raise DuplicateRegistration(
                        f"ID with name '{name}' is already registered in {self._owners.get(live.unique_id)}"
                    )
                return live

            uid = self._string_to_id(name)
            handle = IndexId(name, uid)
            self._by_id[uid] = handle
            self._owners[uid] = owner
            # Drop this frame so the context ends at the caller
            self._contexts[uid] = traceback.StackSummary.from_list(traceback.extract_stack()[:-1])
            logger.debug("Registered %r for owner %s", handle, owner)
            return handle

    def _string_to_id(self, name: str) -> int:
        """Return the persisted id for *name*, allocating one if needed."""
        with self._names_lock:
            uid = self._name_to_id.get(name)
            if uid is not None:
                return uid

            n = len(self._name_to_id) + 1
            if n > MAX_IDS:
                raise CapacityExceeded(f"Number of ids exceeded: {n}")

            self._name_to_id[name] = n
            try:
                self.store.rewrite(self._name_to_id)
            except PersistenceFailure:
                del self._name_to_id[name]
                raise
            logger.debug("Allocated id %d for %r", n, name)
            return n

    def reinitialize_disk_storage(self) -> None:
        """Rewrite the enum store from the in-memory name -> id map."""
        with self._names_lock:
            self.store.rewrite(self._name_to_id)
        logger.info("Reinitialized enum store %s with %d names", self.store.path, len(self._name_to_id))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_by_name(
        self,
        name: str,
        *,
        check_owner: bool = False,
        required_owner: Optional[Owner] = NO_OWNER,
    ) -> Optional[IndexId]:
        """
        Look up the live handle for *name* without allocating.

        Raises:
            OwnershipConflict: If check_owner and the recorded owner
                differs from required_owner
        """
        uid = self.id_for_name(name)
        if uid is None:
            return None
        if not check_owner:
            return self._by_id.get(uid)

        with self._lock:
            handle = self._by_id.get(uid)
            actual = self._owners.get(uid)
            context = self._contexts.get(uid)
        if handle is not None and actual != required_owner:
            raise OwnershipConflict(
                name,
                required_owner,
                actual,
                "".join(context.format()) if context is not None else None,
            )
        return handle

    def find_by_id(self, uid: int) -> Optional[IndexId]:
        return self._by_id.get(uid)

    def id_for_name(self, name: str) -> Optional[int]:
        """Persisted id for *name*, live or not."""
        with self._names_lock:
            return self._name_to_id.get(name)

    def owner_of(self, handle: IndexId) -> Optional[Owner]:
        with self._lock:
            return self._owners.get(handle.unique_id)

    def registration_context(self, handle: IndexId) -> Optional[str]:
        """Formatted stack captured when *handle* was registered."""
        with self._lock:
            context = self._contexts.get(handle.unique_id)
        return "".join(context.format()) if context is not None else None

    def live_ids(self) -> np.ndarray:
        """Sorted ids of all live handles."""
        with self._lock:
            return np.array(sorted(self._by_id), dtype=np.int16)

    def persisted_names(self) -> List[str]:
        """All persisted names ordered by id."""
        with self._names_lock:
            return sorted(self._name_to_id, key=self._name_to_id.__getitem__)

    @property
    def persisted_count(self) -> int:
        with self._names_lock:
            return len(self._name_to_id)

    # ------------------------------------------------------------------
    # Removal and diagnostics
    # ------------------------------------------------------------------

    def unregister(self, handle: IndexId) -> None:
        """
        Remove a live handle. Its id stays reserved in the enum store.

        Raises:
            RegistryInvariantError: If *handle* is not the one registered
                for its id
        """
        if not isinstance(handle, IndexId):
            raise TypeError(f"Expected IndexId, got {type(handle).__name__}")
        with self._lock:
            current = self._by_id.get(handle.unique_id)
            if current is not handle:
                raise RegistryInvariantError(
                    f"{handle!r} is not the registered handle for id {handle.unique_id} (found {current!r})"
                )
            del self._by_id[handle.unique_id]
            self._owners.pop(handle.unique_id, None)
            self._contexts.pop(handle.unique_id, None)
        logger.debug("Unregistered %r", handle)

    def dump(self) -> str:
        """Render the live registry contents."""
        with self._lock:
            entries = [(uid, self._by_id[uid], self._owners.get(uid)) for uid in self.live_ids().tolist()]
        lines = [
            f"ID registry: {len(entries)} live, {self.persisted_count} persisted in {self.store.path}"
        ]
        for uid, handle, owner in entries:
            lines.append(f"  {uid:5d}  {handle.name}  owner={owner}")
        text = "\n".join(lines)
        logger.info("%s", text)
        return text

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find_by_name(name) is not None

    def __repr__(self) -> str:
        return f"IdRegistry({self.store!r}, live={len(self._by_id)})"


def _validate_name(name: str) -> None:
    if not isinstance(name, str):
        raise TypeError(f"Name must be str, got {type(name).__name__}")
    if not name:
        raise ValueError("Name must be non-empty")
    if "\n" in name or "\r" in name:
        raise ValueError(f"Name must not contain line breaks: {name!r}")
