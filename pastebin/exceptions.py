"""
Error types raised by the storage layer.
"""


class PasteStoreError(Exception):
    """Base class for all storage errors."""


class StorageError(PasteStoreError):
    """A write could not be made durable."""


class TransientStorageError(StorageError):
    """I/O or remote service failure. The caller decides whether to retry."""


class CorruptRecordError(PasteStoreError):
    """A stored record could not be parsed. Never leaves a backend."""


class InvalidPasteIdError(PasteStoreError, ValueError):
    """A paste id contains characters outside the safe identifier set."""
