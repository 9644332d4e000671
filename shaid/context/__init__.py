"""System context collection.

This package gathers the local facts (OS, shell, working directory)
that make generated commands fit the user's machine.
"""

from shaid.context.system import (
    MAX_LISTING_ENTRIES,
    SystemContext,
    collect,
    list_directory,
)

__all__ = [
    "MAX_LISTING_ENTRIES",
    "SystemContext",
    "collect",
    "list_directory",
]
