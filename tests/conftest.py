"""Pytest fixtures for the DigPaper API.

Provides:
- A TestClient over a fresh SQLite database and uploads directory per test
- Helpers to create projects and upload files

Usage:
    def test_inbox(client, upload):
        document = upload("IMG_001.jpg")
        assert client.get("/api/documents/inbox").status_code == 200
"""

import os
import shutil
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports to ensure they take effect
TEST_ROOT = Path(tempfile.mkdtemp(prefix="digpaper-tests-"))
TEST_DB = TEST_ROOT / "test.db"
TEST_UPLOADS = TEST_ROOT / "uploads"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB}"
os.environ["UPLOADS_DIR"] = str(TEST_UPLOADS)
os.environ["WEB_DIR"] = str(TEST_ROOT / "web")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_POST_ASSIGNED_PHOTOS"] = "false"
os.environ.pop("APP_API_KEY", None)

import pytest
from fastapi.testclient import TestClient

from digpaper.main import app


def _reset_storage():
    if TEST_DB.exists():
        TEST_DB.unlink()
    if TEST_UPLOADS.exists():
        shutil.rmtree(TEST_UPLOADS)
    TEST_UPLOADS.mkdir(parents=True)


@pytest.fixture
def client():
    """Cliente com base de dados e uploads vazios (Geral e filtros por omissão criados)"""
    _reset_storage()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def uploads_dir() -> Path:
    return TEST_UPLOADS


@pytest.fixture
def create_project(client):
    def _create(name="Obra X", **fields):
        response = client.post("/api/projects", json={"name": name, **fields})
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def upload(client):
    def _upload(filename="IMG_001.jpg", content=b"\xff\xd8\xff" + b"0" * 1024,
                content_type="image/jpeg", audio=None):
        files = {"file": (filename, content, content_type)}
        if audio is not None:
            files["audio"] = audio
        response = client.post("/api/upload", files=files)
        assert response.status_code == 201, response.text
        return response.json()
    return _upload


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(TEST_ROOT, ignore_errors=True)
