#!/usr/bin/env python3
"""
indexid: durable name-to-id registry

Operator tooling for inspecting and maintaining the enum store.

Usage:
    # List persisted names with their ids
    python main.py dump

    # Register a name and print its id
    python main.py register my.index --owner my-plugin

    # Look up a persisted id
    python main.py find my.index

    # Rewrite the store from its current contents
    python main.py reset
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from indexid import (
    IdRegistry,
    IndexIdError,
    Owner,
    NO_OWNER,
    get_settings,
    __version__,
)


def open_from_args(args) -> IdRegistry:
    """Open the registry at --store, or at the configured location."""
    path = args.store or get_settings().enum_path
    return IdRegistry.open(path)


def cmd_dump(args):
    """Print persisted names and live handles."""
    registry = open_from_args(args)
    names = registry.persisted_names()
    print(f"Enum store: {registry.store.path}")
    print(f"  Names: {len(names)}")
    for uid, name in enumerate(names, start=1):
        print(f"  {uid:5d}  {name}")
    return 0


def cmd_register(args):
    registry = open_from_args(args)
    owner = Owner(args.owner) if args.owner else NO_OWNER
    handle = registry.register(args.name, owner)
    print(handle.unique_id)
    return 0


def cmd_find(args):
    registry = open_from_args(args)
    uid = registry.id_for_name(args.name)
    if uid is None:
        print(f"Not registered: {args.name}", file=sys.stderr)
        return 1
    print(uid)
    return 0


def cmd_reset(args):
    """Rewrite the enum store from its loaded contents."""
    registry = open_from_args(args)
    registry.reinitialize_disk_storage()
    print(f"Rewrote {registry.store.path} ({registry.persisted_count} names)")
    return 0


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="indexid",
        description="indexid: durable name-to-id registry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  indexid dump
  indexid register my.index --owner my-plugin
  indexid find my.index
  indexid --store /tmp/indices.enum reset

The store location defaults to $INDEXID_INDEX_ROOT/indices.enum.
""",
    )
    parser.add_argument("--version", action="version", version=f"indexid {__version__}")
    parser.add_argument("--store", help="Path to the enum store file")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("dump", help="List persisted names")

    register_parser = subparsers.add_parser("register", help="Register a name")
    register_parser.add_argument("name", help="Name to register")
    register_parser.add_argument("--owner", help="Registering component")

    find_parser = subparsers.add_parser("find", help="Look up a name's id")
    find_parser.add_argument("name", help="Name to look up")

    subparsers.add_parser("reset", help="Rewrite the enum store")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "dump": cmd_dump,
        "register": cmd_register,
        "find": cmd_find,
        "reset": cmd_reset,
    }
    if args.command is None:
        parser.print_help()
        return 0

    try:
        return commands[args.command](args)
    except (IndexIdError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
