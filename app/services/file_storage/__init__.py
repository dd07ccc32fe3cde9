"""Résumé storage backends."""

from app.core.config import Settings
from app.services.file_storage.base import FileStorage, StorageError
from app.services.file_storage.local import LocalFileStorage
from app.services.file_storage.supabase import SupabaseFileStorage


def build_file_storage(settings: Settings) -> FileStorage:
    """Pick the backend named by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "supabase":
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the supabase backend")
        return SupabaseFileStorage(
            base_url=settings.SUPABASE_URL,
            service_key=settings.SUPABASE_SERVICE_KEY,
            bucket=settings.STORAGE_BUCKET,
        )
    return LocalFileStorage(settings.STORAGE_ROOT, settings.STORAGE_PUBLIC_BASE_URL)


__all__ = [
    "FileStorage",
    "StorageError",
    "LocalFileStorage",
    "SupabaseFileStorage",
    "build_file_storage",
]
