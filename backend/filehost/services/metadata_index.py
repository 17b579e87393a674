"""In-memory metadata index for one category."""
from typing import Iterable, Optional

from filehost.models.file_record import FileRecord


class MetadataIndex:
    """Maps record id to FileRecord.

    Not durable and not thread-safe; the owning CategoryManager is the only
    writer. Filename uniqueness is the manager's job, not the index's.
    """

    def __init__(self, entries: Iterable[tuple[str, FileRecord]] = ()):
        self._records: dict[str, FileRecord] = dict(entries)

    def get(self, file_id: str) -> Optional[FileRecord]:
        return self._records.get(file_id)

    def put(self, file_id: str, record: FileRecord) -> None:
        self._records[file_id] = record

    def delete(self, file_id: str) -> bool:
        return self._records.pop(file_id, None) is not None

    def has(self, file_id: str) -> bool:
        return file_id in self._records

    def list_all(self) -> list[FileRecord]:
        return list(self._records.values())

    def replace_all(self, entries: Iterable[tuple[str, FileRecord]]) -> None:
        self._records = dict(entries)

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._records

    def __len__(self) -> int:
        return len(self._records)
