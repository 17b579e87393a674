"""File storage for one category. Blobs are stored under their filename."""
import logging
from pathlib import Path, PurePath

import aiofiles
import aiofiles.os

from filehost.errors import BadRequest, BlobMissing, StorageError

logger = logging.getLogger(__name__)


def check_filename(filename: str) -> str:
    """Reject names that would escape the category root or name no file."""
    if not filename or filename in (".", ".."):
        raise BadRequest("Invalid filename")
    if "/" in filename or "\\" in filename or PurePath(filename).name != filename:
        raise BadRequest("Invalid filename")
    return filename


class BlobStore:
    """Handles blob read/write/delete under a single root directory.

    The on-disk name is the caller's filename, so two records in one root
    must never share a filename. Checking that is the caller's job.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    async def ensure_root(self) -> None:
        await aiofiles.os.makedirs(self.root, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.root / check_filename(filename)

    async def write(self, filename: str, data: bytes) -> str:
        """Write bytes under the given filename. Returns the storage path."""
        path = self.path_for(filename)
        tmp_path = path.with_name(f".{path.name}.part")
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Failed to write blob {path}: {e}")
            try:
                await aiofiles.os.remove(tmp_path)
            except OSError:
                pass
            raise StorageError(f"Could not write {filename}") from e
        return str(path)

    async def read(self, storage_path: str) -> bytes:
        """Read blob bytes from storage path."""
        try:
            async with aiofiles.open(storage_path, "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise BlobMissing(f"Blob {storage_path} is missing") from e
        except OSError as e:
            logger.error(f"Failed to read blob {storage_path}: {e}")
            raise StorageError(f"Could not read {storage_path}") from e

    async def remove(self, storage_path: str) -> None:
        """Delete a blob. A blob that is already gone counts as removed."""
        try:
            await aiofiles.os.remove(storage_path)
        except FileNotFoundError:
            logger.warning(f"Blob {storage_path} was already absent")
        except OSError as e:
            logger.error(f"Failed to remove blob {storage_path}: {e}")
            raise StorageError(f"Could not remove {storage_path}") from e

    async def move(self, storage_path: str, new_filename: str) -> str:
        """Rename a blob inside the root. Returns the new storage path."""
        target = self.path_for(new_filename)
        if Path(storage_path) == target:
            return storage_path
        try:
            await aiofiles.os.rename(storage_path, target)
        except FileNotFoundError as e:
            raise BlobMissing(f"Blob {storage_path} is missing") from e
        except OSError as e:
            logger.error(f"Failed to move blob {storage_path} to {target}: {e}")
            raise StorageError(f"Could not rename {storage_path}") from e
        return str(target)

    async def exists(self, storage_path: str) -> bool:
        return await aiofiles.os.path.isfile(storage_path)
