"""Error taxonomy shared by the store and the HTTP layer.

Every error carries the HTTP status the routing layer answers with, so the
exception handlers in ``filehost.main`` can turn any of them into a
``{status, message}`` body without knowing which transaction failed.
"""


class StoreError(Exception):
    """Base class for failures surfaced by a category transaction."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(StoreError):
    """Missing upload or an unusable filename."""

    status_code = 400


class NotFound(StoreError):
    """Unknown record id."""

    status_code = 404


class Conflict(StoreError):
    """Another live record in the category already uses the filename."""

    status_code = 409


class StorageError(StoreError):
    """Reading, writing or removing bytes on disk failed."""

    status_code = 500


class BlobMissing(StorageError):
    """A record points at a blob that no longer exists on disk."""


class CorruptSnapshot(StoreError):
    """A snapshot file is non-empty but cannot be decoded."""
