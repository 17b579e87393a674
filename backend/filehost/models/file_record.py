"""FileRecord model - file metadata (actual bytes on the filesystem)."""
from datetime import datetime

from pydantic import AliasChoices, Field

from filehost.models.base import StoredModel


class FileRecord(StoredModel):
    # Snapshots written by the earlier Node service use filepath/size/uploadDate/editDate
    id: str
    filename: str
    storage_path: str = Field(
        validation_alias=AliasChoices("storagePath", "storage_path", "filepath"),
        serialization_alias="storagePath",
    )
    size_bytes: int = Field(
        validation_alias=AliasChoices("sizeBytes", "size_bytes", "size"),
        serialization_alias="sizeBytes",
    )
    created_at: datetime = Field(
        validation_alias=AliasChoices("createdAt", "created_at", "uploadDate"),
        serialization_alias="createdAt",
    )
    modified_at: datetime = Field(
        validation_alias=AliasChoices("modifiedAt", "modified_at", "editDate"),
        serialization_alias="modifiedAt",
    )
