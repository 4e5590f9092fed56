"""
indexid/core/handle.py

Handle and owner types for the id registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

# Ids must fit a signed 16-bit slot
MAX_IDS: int = int(np.iinfo(np.int16).max)


@dataclass(frozen=True)
class Owner:
    """Identity of the component that registered a name."""
    name: str

    def __str__(self) -> str:
        return self.name


# "No owner" sentinel; compares equal only to itself
NO_OWNER: Optional[Owner] = None


class IndexId:
    """
    The unique in-process object representing a registered name's id.

    Instances are created by IdRegistry only. Equality and hashing
    depend on the id alone.
    """

    __slots__ = ("_name", "_unique_id")

    def __init__(self, name: str, unique_id: int):
        self._name = name
        self._unique_id = unique_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def unique_id(self) -> int:
        return self._unique_id

    def __int__(self) -> int:
        return self._unique_id

    def __index__(self) -> int:
        return self._unique_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexId):
            return NotImplemented
        return self._unique_id == other._unique_id

    def __hash__(self) -> int:
        return self._unique_id

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"IndexId({self._name!r}, id={self._unique_id})"
