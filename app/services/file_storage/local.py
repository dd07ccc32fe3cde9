"""
Local filesystem storage backend.

Files live under a root directory and are served by the app at STORAGE_PUBLIC_BASE_URL.
"""

import asyncio
from pathlib import Path

from app.services.file_storage.base import FileStorage, StorageError, last_path_segment


class LocalFileStorage(FileStorage):
    backend = "local"

    def __init__(self, root: str | Path, public_base_url: str = "/files") -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        # Keys are flat file names; refuse anything that could escape the root
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.root / key

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path_for(key)
        if path.exists():
            raise StorageError(f"Object already exists: {key}")

        def _write() -> None:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise StorageError(str(exc)) from exc
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as exc:
            raise StorageError(str(exc)) from exc

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_from_url(self, url: str) -> str | None:
        return last_path_segment(url)

    async def aclose(self) -> None:
        return None
