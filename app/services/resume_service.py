"""
Résumé upload orchestration: validate, name, hand off to storage.
"""

import logging
import secrets
import time

from app.core.config import settings as default_settings, Settings
from app.errors import ErrorCode, OperationResult
from app.services.file_storage import FileStorage, StorageError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def generate_resume_key() -> str:
    """Collision-resistant object name: epoch millis plus random hex."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.pdf"


class ResumeService:
    """Validates résumé files before anything reaches the storage backend."""

    def __init__(self, storage: FileStorage, settings: Settings = default_settings):
        self.storage = storage
        self.max_bytes = settings.RESUME_MAX_BYTES

    def validate(self, content_type: str | None, size: int) -> OperationResult[None]:
        if size <= 0:
            return OperationResult.fail(ErrorCode.VALIDATION_ERROR, "No file provided")
        if (content_type or "").split(";")[0].strip().lower() != PDF_CONTENT_TYPE:
            return OperationResult.fail(ErrorCode.VALIDATION_ERROR, "Only PDF files are allowed")
        if size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            return OperationResult.fail(
                ErrorCode.VALIDATION_ERROR,
                f"The file cannot exceed {limit_mb}MB",
            )
        return OperationResult.ok()

    async def upload_resume(
        self,
        filename: str | None,
        content_type: str | None,
        data: bytes,
    ) -> OperationResult[str]:
        """Store a PDF résumé and return its public URL."""
        check = self.validate(content_type, len(data))
        if not check.success:
            return OperationResult(success=False, error=check.error)

        key = generate_resume_key()
        logger.info("Uploading résumé %s as %s (%d bytes)", filename, key, len(data))
        try:
            url = await self.storage.upload(key, data, PDF_CONTENT_TYPE)
        except StorageError:
            logger.exception("Résumé upload failed for %s", key)
            return OperationResult.fail(ErrorCode.STORE_FAILURE, "Could not upload the résumé")
        return OperationResult.ok(url)

    async def discard(self, key: str) -> None:
        """Remove a résumé whose member was never created. Failures are only logged."""
        try:
            await self.storage.delete(key)
        except StorageError as exc:
            logger.warning("Orphaned résumé %s was not deleted: %s", key, exc)
