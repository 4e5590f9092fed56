"""Durable storage for name -> id assignments."""

from indexid.store.enum_file import EnumStore

__all__ = ["EnumStore"]
