"""Data layer error hierarchy."""

from perch.errors import PerchError


class DataError(PerchError):
    """Base for all perch.data errors."""


class StorageError(DataError):
    """Raised when a storage URL or table definition is unusable."""
