import os
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

# Configure database for tests via settings module rather than hardcoding directly.
# Allow overriding with TEST_DATABASE_URL; fall back to a local sqlite file.
test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./tests/test.db")
os.environ.setdefault("DATABASE_URL", test_db_url)
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from tripmate.core import config as _config  # noqa: E402
_config.get_settings.cache_clear()  # ensure new env vars are picked up # type: ignore[attr-defined]
_settings = _config.get_settings()

from tripmate.api.main import app  # noqa: E402
from tripmate.core.auth import Identity, create_access_token  # noqa: E402
from tripmate.core.errors import PersistenceError  # noqa: E402
from tripmate.db.session import AsyncSessionLocal, engine, Base  # noqa: E402
from tripmate.realtime.connection import Connection  # noqa: E402
from tripmate.realtime.hub import RealtimeHub  # noqa: E402
from tripmate.realtime.presence_broadcaster import PresenceBroadcaster  # noqa: E402
import tripmate.models  # noqa: E402,F401


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class RecordingTransport:
    """Stands in for a WebSocket; keeps every frame sent to it."""

    def __init__(self, fail: bool = False) -> None:
        self.frames: list[dict[str, Any]] = []
        self.fail = fail

    async def send_json(self, data: Any, mode: str = "text") -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.frames.append(data)

    def events(self, name: Optional[str] = None) -> list[dict[str, Any]]:
        return [f for f in self.frames if name is None or f["event"] == name]


@dataclass
class StoredMessage:
    id: int
    thread_id: int
    sender_id: int
    message_type: str
    content: str
    created_at: datetime = field(default_factory=lambda: datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))
    is_read: bool = False


class InMemoryChatStore:
    """ChatStore double: threads are registered up front, writes are recorded."""

    def __init__(self) -> None:
        self.threads: dict[int, tuple[int, int]] = {}
        self.messages: list[StoredMessage] = []
        self.presence_calls: list[tuple[int, bool]] = []
        self.fail_presence = False
        self._ids = itertools.count(1)

    def add_thread(self, thread_id: int, user_a: int, user_b: int) -> None:
        self.threads[thread_id] = (user_a, user_b)

    async def record_message(self, thread_id, sender_id, kind, content):
        members = self.threads.get(int(thread_id))
        if members is None or sender_id not in members:
            return None
        msg = StoredMessage(
            id=next(self._ids),
            thread_id=int(thread_id),
            sender_id=sender_id,
            message_type=kind,
            content=content,
        )
        self.messages.append(msg)
        return msg

    async def set_presence(self, user_id, is_online):
        self.presence_calls.append((user_id, is_online))
        if self.fail_presence:
            raise PersistenceError("database unavailable")


class FakeFileStorage:
    def __init__(self) -> None:
        self.uploads: list[tuple[str, bytes, str, str]] = []

    async def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
        self.uploads.append((filename, data, content_type, folder))
        return f"https://files.test/{folder}/{len(self.uploads)}-{filename}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def settings():
    """Expose application settings to tests if needed."""
    return _settings


@pytest.fixture()
def make_token(settings):
    def _make(user_id: int, **kwargs) -> str:
        return create_access_token(user_id, settings, **kwargs)
    return _make


@pytest.fixture()
def auth_headers(make_token):
    def _headers(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _headers


@pytest.fixture()
def memory_store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture()
def hub() -> RealtimeHub:
    return RealtimeHub()


@pytest.fixture()
def make_conn():
    """Build a Connection over a RecordingTransport; returns (conn, transport)."""
    def _make(user_id: int, fail: bool = False):
        transport = RecordingTransport(fail=fail)
        return Connection(transport, Identity(user_id=user_id)), transport
    return _make


@pytest.fixture(autouse=True)
def _fresh_realtime_state():
    """Give the shared app a clean hub per test; the store stays SQL-backed."""
    app.state.hub = RealtimeHub()
    app.state.presence = PresenceBroadcaster(app.state.hub, app.state.store)
    yield


@pytest_asyncio.fixture()
async def prepare_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture()
async def db_session(prepare_db) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:  # type: ignore
        yield session


@pytest_asyncio.fixture()
async def client(prepare_db):
    # httpx >=0.28 removed the 'app=' shortcut; use ASGITransport explicitly
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture()
def fake_storage() -> FakeFileStorage:
    return FakeFileStorage()


def pytest_configure(config):
    for marker in ("unit", "integration", "smoke"):
        config.addinivalue_line("markers", f"{marker}: {marker} tests")
