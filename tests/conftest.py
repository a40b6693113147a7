"""Pytest configuration and shared fixtures"""

import asyncio
import os
import shutil
import socket
import tempfile
import threading
import time
from pathlib import Path

import pytest

# Point the app at a throwaway database and uploads tree before it is imported
TEST_ROOT = Path(tempfile.mkdtemp(prefix="safebox-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_ROOT / 'safebox.db'}"
os.environ["UPLOAD_DIR"] = str(TEST_ROOT / "uploads")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"

import uvicorn  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from safebox.core.storage import UPLOAD_DIR  # noqa: E402
from safebox.db.session import Base, engine  # noqa: E402
from safebox.main import app  # noqa: E402


async def _reset_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def upload_dir() -> Path:
    return UPLOAD_DIR


@pytest.fixture
def clean_state(upload_dir):
    """Fresh database tables and an empty uploads tree"""
    asyncio.run(_reset_database())
    shutil.rmtree(upload_dir, ignore_errors=True)
    upload_dir.mkdir(parents=True, exist_ok=True)


@pytest.fixture
def client(clean_state):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def live_server(clean_state):
    """Runs the app under uvicorn on a free local port and yields its base URL"""
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]

    server = uvicorn.Server(uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning"))
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.monotonic() + 10
    while not server.started:
        if time.monotonic() > deadline or not thread.is_alive():
            raise RuntimeError("uvicorn did not start")
        time.sleep(0.05)

    yield f"http://127.0.0.1:{port}"

    server.should_exit = True
    thread.join(timeout=10)


@pytest.fixture
def make_user(client):
    def _make_user(email: str, name: str | None = None) -> int:
        resp = client.post("/api/users/get-or-create", json={"email": email, "name": name})
        assert resp.status_code == 200, resp.text
        return resp.json()["data"]["id"]
    return _make_user


@pytest.fixture
def upload(client):
    def _upload(user_id: int, filename: str, content: bytes = b"x" * 1200,
                content_type: str = "application/pdf"):
        return client.post(
            "/api/files/upload",
            headers={"x-user-id": str(user_id)},
            files={"file": (filename, content, content_type)},
        )
    return _upload


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(TEST_ROOT, ignore_errors=True)
