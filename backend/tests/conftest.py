"""
Pytest Configuration and Shared Fixtures

Every test gets its own SQLite database and upload directory under
pytest's tmp_path, so tests never share state.
"""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from docstore.config import Settings
from docstore.database import build_engine, build_session_factory
from docstore.main import create_app
from docstore.models import Base
from docstore.services.document_service import DocumentService, StorageConfig


PDF_HEADER = b"%PDF-1.4\n"


def make_pdf_bytes(size: int) -> bytes:
    """Bytes of exactly ``size`` length that start like a PDF."""
    if size <= len(PDF_HEADER):
        return PDF_HEADER[:size]
    return PDF_HEADER + b"0" * (size - len(PDF_HEADER))


@pytest.fixture
def pdf_bytes():
    """Factory for PDF-looking payloads of a given size."""
    return make_pdf_bytes


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(tmp_path: Path, upload_dir: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file and upload directory."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(upload_dir),
        MAX_FILE_SIZE_BYTES=10_485_760,
        CORS_ORIGIN="http://localhost:3000",
    )


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def engine(test_settings: Settings):
    engine = build_engine(test_settings.DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def service(test_settings: Settings, engine) -> DocumentService:
    """Document service over the test database."""
    return DocumentService(StorageConfig.from_settings(test_settings), build_session_factory(engine))


# =============================================================================
# FastAPI App Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(test_settings: Settings):
    """App with its lifespan running (tables and upload dir created)."""
    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
