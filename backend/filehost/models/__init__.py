"""In-memory record models."""
from filehost.models.base import StoredModel
from filehost.models.file_record import FileRecord

__all__ = ["StoredModel", "FileRecord"]
