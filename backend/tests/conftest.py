from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from filehost.config import Settings
from filehost.main import create_app
from filehost.services.categories import PDF
from filehost.services.category_manager import CategoryManager
from filehost.services.file_storage import BlobStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        FILE_STORAGE_PATH=str(tmp_path / "uploads"),
        SNAPSHOT_PATH=str(tmp_path / "data"),
    )


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def make_manager(tmp_path: Path):
    """Build a PDF manager over tmp_path. Call it inside a running loop."""
    def factory(**kwargs) -> CategoryManager:
        return CategoryManager(
            category=PDF,
            blobs=BlobStore(tmp_path / "pdfs"),
            snapshot_path=tmp_path / "pdfFilesData.json",
            **kwargs,
        )
    return factory
