"""
Base interface for résumé blob storage backends.
"""

from typing import Protocol


class StorageError(Exception):
    """Raised when a storage backend rejects or fails an operation."""


class FileStorage(Protocol):
    """Interface every storage backend implements."""

    backend: str

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Store `data` under `key` and return its public URL."""
        ...

    async def delete(self, key: str) -> None:
        ...

    def public_url(self, key: str) -> str:
        ...

    def key_from_url(self, url: str) -> str | None:
        """Recover the storage key from a URL this backend produced."""
        ...

    async def aclose(self) -> None:
        ...


def last_path_segment(url: str) -> str | None:
    if not url:
        return None
    segment = url.rstrip("/").rsplit("/", 1)[-1]
    return segment or None
