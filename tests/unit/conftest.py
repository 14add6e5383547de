from __future__ import annotations

import os
import socket
import threading
from typing import Iterator
from unittest import mock

import pytest

from mongo_probe.config.settings import get_settings


@pytest.fixture(autouse=True)
def isolated_environment() -> Iterator[None]:
    """Strip MONGODB_* variables and undo anything the loader writes."""
    with mock.patch.dict(os.environ):
        for key in list(os.environ):
            if key.startswith("MONGODB_"):
                del os.environ[key]
        get_settings.cache_clear()
        yield
    get_settings.cache_clear()


@pytest.fixture
def closing_listener() -> Iterator[int]:
    """Local TCP port that accepts connections and closes them at once."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen()
    server.settimeout(0.05)
    stop = threading.Event()

    def serve() -> None:
        while not stop.is_set():
            try:
                conn, _ = server.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            conn.close()

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        yield server.getsockname()[1]
    finally:
        stop.set()
        thread.join(timeout=2)
        server.close()


@pytest.fixture
def write_dotenv(tmp_path):
    def _write(content: str, name: str = ".env"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class FakeAdmin:
    def __init__(self, error: BaseException | None) -> None:
        self.error = error

    def command(self, name: str):
        if self.error is not None:
            raise self.error
        return {"ok": 1.0}


class FakeClient:
    """Stands in for ``MongoClient`` and counts ``close`` calls."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.admin = FakeAdmin(error)
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def fake_client():
    return FakeClient
