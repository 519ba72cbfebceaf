"""Local filesystem storage for uploaded document content."""
import os
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os

CHUNK_SIZE = 64 * 1024


class LocalFileStorage:
    """Handles file write/existence/delete inside a single upload directory."""

    def __init__(self, base_dir: str, extension: str = ".pdf"):
        self.base_dir = base_dir
        self.extension = extension

    @property
    def base_path(self) -> Path:
        """Absolute form of the configured directory, resolved against the cwd."""
        return Path(self.base_dir).resolve()

    async def ensure_dir(self) -> Path:
        path = self.base_path
        await aiofiles.os.makedirs(path, exist_ok=True)
        return path

    def new_filename(self) -> str:
        """Server-generated name; never derived from the client's filename."""
        return f"{uuid.uuid4()}{self.extension}"

    async def save(self, file_bytes: bytes, stored_filename: str) -> str:
        """Write bytes under stored_filename. Returns the absolute path."""
        base_path = await self.ensure_dir()
        file_path = base_path / stored_filename
        async with aiofiles.open(file_path, "wb") as f:
            await f.write(file_bytes)
        return str(file_path)

    async def exists(self, file_path: str) -> bool:
        return await aiofiles.os.path.isfile(file_path)

    async def delete(self, file_path: str) -> bool:
        """Delete file. Returns False if it was already gone."""
        if not await self.exists(file_path):
            return False
        await aiofiles.os.remove(file_path)
        return True

    async def open(self, file_path: str):
        """Open stored content for reading. Returns (handle, size in bytes).

        Raises FileNotFoundError if the file is gone. The caller owns the handle.
        """
        handle = await aiofiles.open(file_path, "rb")
        try:
            size = os.fstat(handle.fileno()).st_size
        except OSError:
            await handle.close()
            raise
        return handle, size


async def iter_chunks(handle, chunk_size: int = CHUNK_SIZE):
    """Yield the handle's content in chunks, closing it when done."""
    try:
        while True:
            chunk = await handle.read(chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        await handle.close()
