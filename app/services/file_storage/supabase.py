"""
Supabase Storage backend (REST API over httpx).
"""

import logging
from typing import Optional

import httpx

from app.services.file_storage.base import FileStorage, StorageError, last_path_segment

logger = logging.getLogger(__name__)


class SupabaseFileStorage(FileStorage):
    """Stores résumés in a public Supabase Storage bucket."""

    backend = "supabase"

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str = "cvs",
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={
                "Authorization": f"Bearer {service_key}",
                "apikey": service_key,
            },
        )

    def _object_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/{self.bucket}/{key}"

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            resp = await self._client.post(
                self._object_url(key),
                content=data,
                headers={
                    "Content-Type": content_type,
                    "Cache-Control": "3600",
                    "x-upsert": "false",
                },
            )
        except httpx.HTTPError as exc:
            raise StorageError(f"Upload failed: {exc}") from exc

        if resp.status_code >= 400:
            logger.error("Supabase upload of %s failed: %s %s", key, resp.status_code, resp.text[:200])
            raise StorageError(f"Upload failed with status {resp.status_code}")
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        try:
            resp = await self._client.request(
                "DELETE",
                f"{self.base_url}/storage/v1/object/{self.bucket}",
                json={"prefixes": [key]},
            )
        except httpx.HTTPError as exc:
            raise StorageError(f"Delete failed: {exc}") from exc

        if resp.status_code >= 400:
            raise StorageError(f"Delete failed with status {resp.status_code}")

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{key}"

    def key_from_url(self, url: str) -> str | None:
        return last_path_segment(url)

    async def aclose(self) -> None:
        await self._client.aclose()
