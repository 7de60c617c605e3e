"""
Shared Infrastructure Module
=============================

Adapters for the local data provider and cloud metadata snapshots.
"""

from splatcad.shared.infrastructure.providers import (
    CommandInventoryProvider,
    JsonCloudSnapshot,
    JsonInventoryProvider,
)

__all__ = [
    "JsonInventoryProvider",
    "CommandInventoryProvider",
    "JsonCloudSnapshot",
]
