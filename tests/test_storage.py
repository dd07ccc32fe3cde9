"""
Résumé storage tests: local backend, Supabase backend over a mocked transport,
and upload validation.
"""

import json

import httpx
import pytest

from app.core.config import Settings
from app.errors import ErrorCode
from app.services.file_storage import (
    LocalFileStorage,
    StorageError,
    SupabaseFileStorage,
    build_file_storage,
)
from app.services.resume_service import ResumeService, generate_resume_key

from tests.conftest import minimal_pdf


class RecordingStorage:
    backend = "memory"

    def __init__(self):
        self.uploads = []
        self.deleted = []

    async def upload(self, key, data, content_type):
        self.uploads.append((key, content_type, len(data)))
        return self.public_url(key)

    async def delete(self, key):
        self.deleted.append(key)

    def public_url(self, key):
        return f"/files/{key}"

    def key_from_url(self, url):
        return url.rsplit("/", 1)[-1]

    async def aclose(self):
        return None


# ---------------------------------------------------------------------------
# Local backend
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_local_upload_and_delete(tmp_path):
    storage = LocalFileStorage(tmp_path / "cvs", "/files/")

    url = await storage.upload("123-abc.pdf", minimal_pdf(), "application/pdf")

    assert url == "/files/123-abc.pdf"
    assert (tmp_path / "cvs" / "123-abc.pdf").read_bytes() == minimal_pdf()
    assert storage.key_from_url(url) == "123-abc.pdf"

    await storage.delete("123-abc.pdf")
    assert not (tmp_path / "cvs" / "123-abc.pdf").exists()
    # Deleting a missing object is not an error
    await storage.delete("123-abc.pdf")


@pytest.mark.asyncio
async def test_local_upload_never_overwrites(tmp_path):
    storage = LocalFileStorage(tmp_path)
    await storage.upload("same.pdf", b"first", "application/pdf")

    with pytest.raises(StorageError):
        await storage.upload("same.pdf", b"second", "application/pdf")

    assert (tmp_path / "same.pdf").read_bytes() == b"first"


@pytest.mark.asyncio
async def test_local_rejects_path_traversal(tmp_path):
    storage = LocalFileStorage(tmp_path)

    with pytest.raises(StorageError):
        await storage.upload("../escape.pdf", b"x", "application/pdf")


# ---------------------------------------------------------------------------
# Supabase backend
# ---------------------------------------------------------------------------

def _supabase(handler) -> SupabaseFileStorage:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseFileStorage("https://proj.supabase.co/", "service-key", bucket="cvs", client=client)


@pytest.mark.asyncio
async def test_supabase_upload_returns_public_url():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["upsert"] = request.headers["x-upsert"]
        return httpx.Response(200, json={"Key": "cvs/123-abc.pdf"})

    storage = _supabase(handler)
    url = await storage.upload("123-abc.pdf", minimal_pdf(), "application/pdf")
    await storage.aclose()

    assert seen == {
        "method": "POST",
        "url": "https://proj.supabase.co/storage/v1/object/cvs/123-abc.pdf",
        "content_type": "application/pdf",
        "upsert": "false",
    }
    assert url == "https://proj.supabase.co/storage/v1/object/public/cvs/123-abc.pdf"
    assert storage.key_from_url(url) == "123-abc.pdf"


@pytest.mark.asyncio
async def test_supabase_upload_error_status_raises():
    storage = _supabase(lambda request: httpx.Response(409, json={"error": "Duplicate"}))

    with pytest.raises(StorageError):
        await storage.upload("123-abc.pdf", b"x", "application/pdf")


@pytest.mark.asyncio
async def test_supabase_delete_sends_prefixes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[])

    storage = _supabase(handler)
    await storage.delete("123-abc.pdf")

    assert seen == {
        "method": "DELETE",
        "path": "/storage/v1/object/cvs",
        "body": {"prefixes": ["123-abc.pdf"]},
    }


@pytest.mark.asyncio
async def test_supabase_network_error_raises_storage_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    storage = _supabase(handler)

    with pytest.raises(StorageError):
        await storage.delete("123-abc.pdf")


@pytest.mark.unit
def test_build_file_storage_requires_supabase_credentials():
    settings = Settings(_env_file=None, STORAGE_BACKEND="supabase")

    with pytest.raises(ValueError):
        build_file_storage(settings)


@pytest.mark.unit
def test_build_file_storage_defaults_to_local(tmp_path):
    storage = build_file_storage(Settings(_env_file=None, STORAGE_ROOT=str(tmp_path)))

    assert storage.backend == "local"


# ---------------------------------------------------------------------------
# Résumé validation
# ---------------------------------------------------------------------------

@pytest.mark.unit
def test_generate_resume_key_is_unique_pdf_name():
    keys = {generate_resume_key() for _ in range(50)}

    assert len(keys) == 50
    assert all(key.endswith(".pdf") and "/" not in key for key in keys)


@pytest.mark.asyncio
async def test_upload_resume_rejects_non_pdf_before_storage():
    storage = RecordingStorage()
    service = ResumeService(storage, Settings(_env_file=None))

    result = await service.upload_resume("cv.docx", "application/msword", b"data")

    assert result.error_code is ErrorCode.VALIDATION_ERROR
    assert result.error.message == "Only PDF files are allowed"
    assert storage.uploads == []


@pytest.mark.asyncio
async def test_upload_resume_rejects_oversized_file_before_storage():
    storage = RecordingStorage()
    service = ResumeService(storage, Settings(_env_file=None, RESUME_MAX_BYTES=1024 * 1024))

    result = await service.upload_resume("cv.pdf", "application/pdf", b"x" * (1024 * 1024 + 1))

    assert result.error_code is ErrorCode.VALIDATION_ERROR
    assert result.error.message == "The file cannot exceed 1MB"
    assert storage.uploads == []


@pytest.mark.asyncio
async def test_upload_resume_stores_pdf():
    storage = RecordingStorage()
    service = ResumeService(storage, Settings(_env_file=None))

    result = await service.upload_resume("cv.pdf", "application/pdf", minimal_pdf())

    assert result.success
    key, content_type, size = storage.uploads[0]
    assert result.data == f"/files/{key}"
    assert content_type == "application/pdf"
    assert size == len(minimal_pdf())


@pytest.mark.asyncio
async def test_upload_resume_storage_failure_is_store_failure():
    class FailingStorage(RecordingStorage):
        async def upload(self, key, data, content_type):
            raise StorageError("disk full")

    result = await ResumeService(FailingStorage(), Settings(_env_file=None)).upload_resume(
        "cv.pdf", "application/pdf", minimal_pdf()
    )

    assert result.error_code is ErrorCode.STORE_FAILURE
