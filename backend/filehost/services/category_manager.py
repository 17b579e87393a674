"""Category manager: create/fetch/edit/delete transactions for one category.

The manager is the only writer of its category's MetadataIndex and blob
directory. Every transaction keeps the two in agreement:

- create writes the blob before touching the index, so a failed write never
  leaves an index entry without bytes;
- edit removes the old blob before writing the new one, and aborts with the
  old state intact if the removal fails;
- delete removes the blob first and drops the record only after that
  succeeds, so a failed delete can be retried.

Domain checks (NotFound, Conflict, BadRequest) always run before any
mutation. All transactions on one category are serialized by an
asyncio.Lock so check-then-write sequences cannot interleave.

After every successful mutation a snapshot write is scheduled in the
background. It is best-effort: failures are logged and the in-memory index
stays authoritative. ``flush()`` waits for pending writes.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import aiofiles.os

from filehost.errors import BlobMissing, Conflict, CorruptSnapshot, NotFound, StorageError
from filehost.models.file_record import FileRecord
from filehost.services.categories import Category
from filehost.services.file_storage import BlobStore, check_filename
from filehost.services.metadata_index import MetadataIndex
from filehost.services.snapshot_codec import deserialize, read_snapshot, serialize, write_snapshot

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "File with the same name already exists"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FileUpdate:
    """Fields an edit may change. modified_at is always set by the server."""
    filename: Optional[str] = None
    data: Optional[bytes] = None


class CategoryManager:
    def __init__(
        self,
        category: Category,
        blobs: BlobStore,
        snapshot_path: Path,
        index: Optional[MetadataIndex] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.category = category
        self.snapshot_path = Path(snapshot_path)
        self._blobs = blobs
        self._index = index if index is not None else MetadataIndex()
        self._clock = clock
        self._lock = asyncio.Lock()
        self._persist_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    @property
    def blobs(self) -> BlobStore:
        return self._blobs

    # ── Startup ──────────────────────────────────────────────────

    async def load(self) -> int:
        """Populate the index from the snapshot. Returns the record count.

        A missing or blank snapshot is a fresh store. A corrupt or unreadable
        one is logged and replaced by an empty index instead of failing
        startup.
        """
        label = self.category.label
        await self._blobs.ensure_root()
        await aiofiles.os.makedirs(self.snapshot_path.parent, exist_ok=True)
        try:
            entries = deserialize(await read_snapshot(self.snapshot_path))
        except (CorruptSnapshot, StorageError) as e:
            logger.error(f"Error loading {label} files data from {self.snapshot_path}: {e}")
            entries = []

        self._index.replace_all(entries)
        if not entries:
            logger.info(f"Nothing to load for {label} files")
            return 0

        missing = 0
        for record in self._index.list_all():
            if not await self._blobs.exists(record.storage_path):
                missing += 1
                logger.warning(
                    f"{label} {record.id} ({record.filename}) has no blob at {record.storage_path}"
                )
        logger.info(f"Loaded {len(self._index)} {label} record(s), {missing} missing blob(s)")
        return len(self._index)

    # ── Reads ────────────────────────────────────────────────────

    def list_all(self) -> list[FileRecord]:
        return self._index.list_all()

    def get(self, file_id: str) -> FileRecord:
        record = self._index.get(file_id)
        if record is None:
            raise NotFound(f"{self.category.label} not found")
        return record

    async def fetch(self, file_id: str) -> bytes:
        """Return the blob bytes for a record."""
        async with self._lock:
            record = self.get(file_id)
            try:
                return await self._blobs.read(record.storage_path)
            except BlobMissing as e:
                self._log_missing_blob(record)
                raise BlobMissing("Internal Server Error") from e
            except StorageError as e:
                raise StorageError("Internal Server Error") from e

    # ── Mutations ────────────────────────────────────────────────

    async def create(self, filename: str, data: bytes) -> FileRecord:
        label = self.category.label
        check_filename(filename)
        async with self._lock:
            if self._filename_taken(filename):
                raise Conflict(CONFLICT_MESSAGE)

            try:
                storage_path = await self._blobs.write(filename, data)
            except StorageError as e:
                raise StorageError(f"Error saving {label} file") from e

            now = self._clock()
            record = FileRecord(
                id=str(uuid.uuid4()),
                filename=filename,
                storage_path=storage_path,
                size_bytes=len(data),
                created_at=now,
                modified_at=now,
            )
            self._index.put(record.id, record)

        logger.info(f"Created {label} {record.id} ({filename}, {record.size_bytes} bytes)")
        self.schedule_persist()
        return record

    async def edit(self, file_id: str, update: FileUpdate) -> FileRecord:
        """Replace the blob and/or rename a record.

        The record ends up named ``update.filename`` if given, else it keeps
        its current name. New bytes are written under that name after the
        old blob is removed; a rename without bytes moves the blob.
        """
        label = self.category.label
        async with self._lock:
            record = self.get(file_id)
            target = check_filename(update.filename or record.filename)
            if self._filename_taken(target, exclude_id=file_id):
                raise Conflict(CONFLICT_MESSAGE)

            changes = {}
            if update.data is not None:
                try:
                    await self._blobs.remove(record.storage_path)
                except StorageError as e:
                    raise StorageError(f"Error deleting old {label} file") from e
                try:
                    storage_path = await self._blobs.write(target, update.data)
                except StorageError as e:
                    logger.error(f"{label} {file_id} lost its blob: replacement write failed")
                    raise StorageError(f"Error saving {label} file") from e
                changes.update(
                    filename=target,
                    storage_path=storage_path,
                    size_bytes=len(update.data),
                )
            elif target != record.filename:
                try:
                    storage_path = await self._blobs.move(record.storage_path, target)
                except BlobMissing as e:
                    self._log_missing_blob(record)
                    raise BlobMissing(f"Error renaming {label} file") from e
                except StorageError as e:
                    raise StorageError(f"Error renaming {label} file") from e
                changes.update(filename=target, storage_path=storage_path)

            changes["modified_at"] = self._next_timestamp(record.modified_at)
            updated = record.model_copy(update=changes)
            self._index.put(file_id, updated)

        logger.info(f"Updated {label} {file_id} ({updated.filename})")
        self.schedule_persist()
        return updated

    async def delete(self, file_id: str) -> FileRecord:
        label = self.category.label
        async with self._lock:
            record = self.get(file_id)
            try:
                await self._blobs.remove(record.storage_path)
            except StorageError as e:
                raise StorageError(f"Error deleting {label} file") from e
            self._index.delete(file_id)

        logger.info(f"Deleted {label} {file_id} ({record.filename})")
        self.schedule_persist()
        return record

    # ── Persistence ──────────────────────────────────────────────

    async def persist(self) -> None:
        """Write the current index to the snapshot. Raises StorageError."""
        async with self._persist_lock:
            data = serialize(self._index.list_all())
            await write_snapshot(self.snapshot_path, data)

    def schedule_persist(self) -> None:
        """Fire-and-forget snapshot write on the running loop."""
        task = asyncio.get_running_loop().create_task(self._persist_best_effort())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait until every scheduled snapshot write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _persist_best_effort(self) -> None:
        label = self.category.label
        try:
            await self.persist()
        except StorageError as e:
            logger.error(f"Error updating {label} files data: {e}")
        else:
            logger.debug(f"{label} files data updated successfully")

    # ── Helpers ──────────────────────────────────────────────────

    def _filename_taken(self, filename: str, exclude_id: Optional[str] = None) -> bool:
        return any(
            r.filename == filename and r.id != exclude_id
            for r in self._index.list_all()
        )

    def _log_missing_blob(self, record: FileRecord) -> None:
        logger.error(
            f"{self.category.label} {record.id} is indexed but its blob "
            f"{record.storage_path} is missing"
        )

    def _next_timestamp(self, previous: datetime) -> datetime:
        # modified_at must move forward even if the clock has not ticked
        now = self._clock()
        floor = previous + timedelta(microseconds=1)
        return now if now >= floor else floor
