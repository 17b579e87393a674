"""Snapshot codec: the durable form of a category index.

A snapshot is a JSON array of ``[id, record]`` pairs, e.g.::

    [["3f0c...", {"id": "3f0c...", "filename": "report.pdf", ...}]]

``serialize``/``deserialize`` are pure. ``read_snapshot``/``write_snapshot``
only move bytes between memory and disk; deciding what to do when a snapshot
is missing or corrupt is up to the caller.
"""
from pathlib import Path
from typing import Iterable, Optional, Union

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter, ValidationError

from filehost.errors import CorruptSnapshot, StorageError
from filehost.models.file_record import FileRecord

_ENTRIES = TypeAdapter(list[tuple[str, FileRecord]])


def serialize(records: Iterable[FileRecord]) -> bytes:
    """Encode records as a JSON array of ``[id, record]`` pairs."""
    return _ENTRIES.dump_json([(r.id, r) for r in records], by_alias=True)


def deserialize(data: Optional[Union[bytes, str]]) -> list[tuple[str, FileRecord]]:
    """Decode a snapshot.

    Absent or blank input is a fresh store, not corruption, and yields an
    empty list. Anything else that does not decode raises CorruptSnapshot.
    """
    if data is None or not data.strip():
        return []
    try:
        entries = _ENTRIES.validate_json(data)
    except ValidationError as e:
        raise CorruptSnapshot(f"Malformed snapshot: {e.error_count()} error(s)") from e

    for key, record in entries:
        if key != record.id:
            raise CorruptSnapshot(f"Snapshot key {key} does not match record id {record.id}")
    return entries


async def read_snapshot(path: Path) -> Optional[bytes]:
    """Read raw snapshot bytes. Returns None if the file does not exist."""
    try:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(f"Could not read snapshot {path}: {e}") from e


async def write_snapshot(path: Path, data: bytes) -> None:
    """Write snapshot bytes through a temp file so readers never see a partial file."""
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        async with aiofiles.open(tmp_path, "wb") as f:
            await f.write(data)
        await aiofiles.os.replace(tmp_path, path)
    except OSError as e:
        try:
            await aiofiles.os.remove(tmp_path)
        except OSError:
            pass
        raise StorageError(f"Could not write snapshot {path}: {e}") from e

