"""
indexid/store/enum_file.py

Durable enum store: one name per line, line number (1-based) is the id.

The file is loaded once when a registry is opened and rewritten in full
whenever a name is allocated. Callers serialize access; the store holds
no lock of its own.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Mapping, Union

from indexid.core.errors import PersistenceFailure
from indexid.core.handle import MAX_IDS

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class CorruptStoreError(ValueError):
    """Store content cannot be mapped to a dense name list."""


class EnumStore:
    """
    Flat file holding the ordered list of registered names.

    Attributes:
        path: Location of the enum file
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Dict[str, int]:
        """
        Read the name -> id map from disk.

        A missing, unreadable or corrupt file yields an empty map and is
        replaced by an empty store. Never raises.

        Returns:
            Map from name to 1-based id
        """
        try:
            text = self.path.read_text(encoding=ENCODING)
            return parse_names(split_lines(text))
        except (OSError, UnicodeDecodeError, CorruptStoreError) as exc:
            logger.warning("Resetting enum store %s: %s", self.path, exc)

        try:
            self.rewrite({})
        except PersistenceFailure:
            logger.error("Could not reset enum store %s", self.path, exc_info=True)
        return {}

    def rewrite(self, name_to_id: Mapping[str, int]) -> None:
        """
        Atomically replace the file with the given mapping.

        Raises:
            PersistenceFailure: If the ids are not dense or the write fails
        """
        names = order_names(name_to_id)
        data = "".join(f"{name}\n" for name in names)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding=ENCODING, newline="\n") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as exc:
            raise PersistenceFailure(f"Cannot write enum store {self.path}: {exc}") from exc

        logger.debug("Wrote %d names to %s", len(names), self.path)

    def __repr__(self) -> str:
        return f"EnumStore({str(self.path)!r})"


def split_lines(text: str) -> List[str]:
    """Split on newlines only; names may hold other Unicode separators."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_names(lines: List[str]) -> Dict[str, int]:
    """Map each line to its 1-based position, rejecting malformed content."""
    if len(lines) > MAX_IDS:
        raise CorruptStoreError(f"{len(lines)} names exceed capacity {MAX_IDS}")

    name_to_id: Dict[str, int] = {}
    for i, name in enumerate(lines):
        if not name:
            raise CorruptStoreError(f"empty name at line {i + 1}")
        if name in name_to_id:
            raise CorruptStoreError(f"duplicate name {name!r} at line {i + 1}")
        name_to_id[name] = i + 1
    return name_to_id


def order_names(name_to_id: Mapping[str, int]) -> List[str]:
    """Invert a name -> id map into a list indexed by id - 1."""
    names: List[str] = [""] * len(name_to_id)
    for name, idx in name_to_id.items():
        if not 1 <= idx <= len(names) or names[idx - 1]:
            raise PersistenceFailure(f"Id {idx} for {name!r} breaks the dense id sequence")
        names[idx - 1] = name
    return names
