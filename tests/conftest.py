"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite file under tmp_path (through aiosqlite) and a
local résumé directory, so nothing depends on a running PostgreSQL server.
"""

import asyncio
import io
from typing import Any, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from openpyxl import Workbook
from sqlalchemy import event
from sqlalchemy.pool import NullPool

from app.core.config import Settings
from app.db.base import Base
from app.db.session import Database
from app.main import create_app
from app.models.stage import Stage
from app.models.user import User
from app.core.security import hash_password
from app.services.file_storage import LocalFileStorage


TEST_ADMIN_EMAIL = "admin@test.com"
TEST_ADMIN_PASSWORD = "admin12345"

# (id, name, order)
DEFAULT_TEST_STAGES = [
    ("info-cargada", "Info Cargada", 1),
    ("calificado", "Calificado", 2),
    ("referido", "Referido", 3),
    ("contratado", "Contratado", 4),
]


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: uses the temporary SQLite database")


def sqlite_database(url: str) -> Database:
    """
    Database on aiosqlite with real transactions and foreign keys.

    The driver's own transaction handling is switched off so SAVEPOINTs
    (used by the bulk import) behave like they do on PostgreSQL.
    """
    database = Database(url, poolclass=NullPool)

    @event.listens_for(database.engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(database.engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return database


async def create_schema(database: Database) -> None:
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def add_stages(database: Database, stages: Iterable = DEFAULT_TEST_STAGES) -> None:
    async with database.session() as session:
        for stage_id, name, order in stages:
            session.add(Stage(id=stage_id, name=name, order=order))
        await session.commit()


async def add_user(database: Database, email: str = TEST_ADMIN_EMAIL, password: str = TEST_ADMIN_PASSWORD) -> None:
    async with database.session() as session:
        session.add(User(email=email, full_name="Admin User", hashed_password=hash_password(password)))
        await session.commit()


def member_payload(**overrides: Any) -> Dict[str, Any]:
    """A profile that passes every create/application validation rule."""
    data: Dict[str, Any] = {
        "full_name": "Ana Torres",
        "email": "ana@example.com",
        "whatsapp": "+5491122334455",
        "linkedin_url": "https://www.linkedin.com/in/ana-torres",
        "area": "DEVELOPMENT",
        "current_role": "Backend Developer",
        "years_experience": 4,
        "english_level": "ADVANCED",
        "location": "Buenos Aires",
        "work_preference": "REMOTE",
        "willing_to_relocate": False,
    }
    data.update(overrides)
    return data


def minimal_pdf() -> bytes:
    return b"%PDF-1.4\n1 0 obj <<>> endobj\ntrailer <<>>\n%%EOF\n"


def workbook_bytes(rows: Iterable[Iterable[Any]]) -> bytes:
    """An .xlsx file whose first sheet holds `rows` (header first)."""
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(list(row))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret-key-with-at-least-32-characters",
        STORAGE_BACKEND="local",
        STORAGE_ROOT=str(tmp_path / "resumes"),
        STORAGE_PUBLIC_BASE_URL="/files",
    )


@pytest.fixture
def storage(test_settings) -> LocalFileStorage:
    return LocalFileStorage(test_settings.STORAGE_ROOT, test_settings.STORAGE_PUBLIC_BASE_URL)


@pytest_asyncio.fixture
async def database(test_settings):
    """Empty schema, no stages."""
    database = sqlite_database(test_settings.DATABASE_URL)
    await create_schema(database)
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def seeded_database(database):
    """Schema plus the four default stages."""
    await add_stages(database)
    return database


@pytest_asyncio.fixture
async def db_session(seeded_database):
    async with seeded_database.session() as session:
        yield session


@pytest_asyncio.fixture
async def empty_db_session(database):
    """Session on a database with no stages at all."""
    async with database.session() as session:
        yield session


def build_client(
    test_settings: Settings,
    storage: LocalFileStorage,
    stages: Optional[List] = None,
    with_user: bool = True,
) -> TestClient:
    """
    App + TestClient over a fresh SQLite file.

    Schema and fixtures are written before the client starts; NullPool keeps
    connections from crossing event loops.
    """
    database = sqlite_database(test_settings.DATABASE_URL)

    async def prepare():
        await create_schema(database)
        await add_stages(database, DEFAULT_TEST_STAGES if stages is None else stages)
        if with_user:
            await add_user(database)

    asyncio.run(prepare())
    app = create_app(settings=test_settings, database=database, storage=storage)
    return TestClient(app)


def login(client: TestClient) -> TestClient:
    response = client.post(
        "/login",
        data={"email": TEST_ADMIN_EMAIL, "password": TEST_ADMIN_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303, response.text[:200]
    return client


@pytest.fixture
def client(test_settings, storage):
    """Anonymous client; stages and a staff user exist."""
    with build_client(test_settings, storage) as test_client:
        yield test_client


@pytest.fixture
def auth_client(client):
    """Client holding a staff session cookie."""
    return login(client)
