# tests/conftest.py
from __future__ import annotations

import os

os.environ.setdefault("TESTING", "1")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET", "test-secret")

import datetime as dt
import fnmatch
from typing import Any

import httpx
import pytest
from httpx import ASGITransport
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from billdash.auth import TokenSet, get_identity_provider
from billdash.core.config import Settings
from billdash.db.base import Base
from billdash.db.models import Customer, Invoice
from billdash.db.session import build_engine, get_db
from billdash.errors import AuthError, StorageError
from billdash.main import create_app
from billdash.page_cache import PageCache
from billdash.services.storage import SqlStorage

TEST_EMAIL = "user@nextmail.com"
TEST_PASSWORD = "123456"


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


# ==============================================================
# Test doubles for the mutation ports and identity provider
# ==============================================================

class RecordingNotifier:
    def __init__(self) -> None:
        self.paths: list[str] = []

    async def revalidate_path(self, path: str) -> None:
        self.paths.append(path)


class FakeStorage:
    """In-memory storage port; ``fail=True`` makes every call raise StorageError."""

    def __init__(self, fail: bool = False, rowcount: int = 1) -> None:
        self.fail = fail
        self.rowcount = rowcount
        self.calls: list[tuple[str, tuple, dict[str, Any]]] = []

    def _record(self, op: str, /, *args, **kwargs) -> None:
        self.calls.append((op, args, kwargs))
        if self.fail:
            raise StorageError("connection refused")

    async def insert_invoice(self, **kwargs) -> str:
        self._record("insert_invoice", **kwargs)
        return "inv-1"

    async def update_invoice(self, invoice_id, **kwargs) -> int:
        self._record("update_invoice", invoice_id, **kwargs)
        return self.rowcount

    async def delete_invoice(self, invoice_id) -> int:
        self._record("delete_invoice", invoice_id)
        return self.rowcount

    async def insert_customer(self, **kwargs) -> str:
        self._record("insert_customer", **kwargs)
        return "cust-1"

    async def update_customer(self, customer_id, **kwargs) -> int:
        self._record("update_customer", customer_id, **kwargs)
        return self.rowcount

    async def delete_customer(self, customer_id) -> int:
        self._record("delete_customer", customer_id)
        return self.rowcount


class FakeRedis:
    """The slice of redis.asyncio.Redis the page cache uses; may be shared by several caches."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int] = {}
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def get(self, key: str):
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self._check()
        self.data[key] = value
        if ex is not None:
            self.expiry[key] = ex

    async def scan_iter(self, match: str = "*", count: int | None = None):
        self._check()
        for key in list(self.data):
            if fnmatch.fnmatchcase(key, match):
                yield key

    async def delete(self, *keys: str) -> int:
        self._check()
        return sum(self.data.pop(k, None) is not None for k in keys)

    async def aclose(self) -> None:
        self.closed = True


class FakeProvider:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def sign_in(self, username: str, password: str) -> TokenSet:
        self.calls.append((username, password))
        if self.error is not None:
            raise self.error
        if (username, password) != (TEST_EMAIL, TEST_PASSWORD):
            raise AuthError("bad credentials", AuthError.CREDENTIALS_SIGNIN)
        return TokenSet.from_oidc_response(
            {"access_token": "access", "expires_in": 300, "refresh_token": "refresh", "refresh_expires_in": 1800}
        )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


# ==============================================================
# Database (SQLite file per test; FK + CHECK constraints enforced)
# ==============================================================

@pytest.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'billdash.db'}", testing=True)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(sessionmaker):
    async with sessionmaker() as s:
        yield s


@pytest.fixture
def storage(session) -> SqlStorage:
    return SqlStorage(session)


@pytest.fixture
async def customer(sessionmaker) -> Customer:
    async with sessionmaker() as s:
        c = Customer(id="c1", name="Evil Rabbit", email="evil@rabbit.com", image_url="/customers/evil-rabbit.png")
        s.add(c)
        await s.commit()
    return c


@pytest.fixture
async def seeded(sessionmaker, customer):
    """Two customers, eight invoices spread over eight days."""
    async with sessionmaker() as s:
        s.add(Customer(id="c2", name="Amy Burns", email="amy@burns.com", image_url="/customers/amy-burns.png"))
        base = dt.date(2026, 10, 1)
        for i in range(8):
            s.add(
                Invoice(
                    id=f"i{i}",
                    customer_id="c1" if i % 2 == 0 else "c2",
                    amount=1000 * (i + 1),
                    status="paid" if i < 3 else "pending",
                    date=base + dt.timedelta(days=i),
                )
            )
        await s.commit()


# ==============================================================
# HTTP client against the ASGI app
# ==============================================================

@pytest.fixture
def page_cache() -> PageCache:
    return PageCache()


@pytest.fixture
def make_app(sessionmaker, provider):
    """Build an app on the test database; several apps stand in for several workers."""

    def _make(cache):
        application = create_app(Settings(TESTING=True), page_cache=cache)

        async def _get_db():
            async with sessionmaker() as s:
                yield s

        application.dependency_overrides[get_db] = _get_db
        application.dependency_overrides[get_identity_provider] = lambda: provider
        return application

    return _make


@pytest.fixture
def app(make_app, page_cache):
    return make_app(page_cache)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
async def auth_client(client):
    r = await client.post("/login", data={"email": TEST_EMAIL, "password": TEST_PASSWORD})
    assert r.status_code == 303, r.text
    return client
