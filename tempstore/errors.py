"""
Exception hierarchy for the store.

Every failure a caller can observe derives from StoreError.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for all store failures."""


class DuplicateNameError(StoreError):
    """Raised when a store name is already registered."""


class InstanceNotFoundError(StoreError):
    """Raised for unknown store names and terminated instances."""


class SnapshotIOError(StoreError):
    """Raised when a snapshot cannot be written or read."""


class CorruptSnapshotError(SnapshotIOError):
    """Raised when snapshot bytes do not decode into a table."""
