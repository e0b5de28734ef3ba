import threading

import pytest

from billdash.core.config import Settings
from billdash.page_cache import PageCache, RedisPageCache, build_page_cache

from .conftest import FakeRedis

pytestmark = pytest.mark.anyio

KEYS = (
    "/dashboard/invoices",
    "/dashboard/invoices?page=2",
    "/dashboard/invoices?query=amy&page=1",
    "/dashboard/invoices/abc/edit",
    "/dashboard/invoices-archive",
    "/dashboard/customers",
    "/dashboard",
)


class Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


async def _fill(cache) -> None:
    for key in KEYS:
        await cache.set(key, f"<p>{key}</p>")


def test_key_for():
    assert PageCache.key_for("/dashboard/invoices") == "/dashboard/invoices"
    assert PageCache.key_for("/dashboard/invoices", "page=2") == "/dashboard/invoices?page=2"


async def test_get_set():
    cache = PageCache()
    assert await cache.get("/x") is None
    await cache.set("/x", "html")
    assert await cache.get("/x") == "html"
    assert "/x" in cache


async def test_revalidate_drops_path_and_children_only():
    cache = PageCache()
    await _fill(cache)
    await cache.revalidate_path("/dashboard/invoices/")

    assert "/dashboard/invoices" not in cache
    assert "/dashboard/invoices?page=2" not in cache
    assert "/dashboard/invoices?query=amy&page=1" not in cache
    assert "/dashboard/invoices/abc/edit" not in cache
    assert "/dashboard/invoices-archive" in cache
    assert "/dashboard/customers" in cache
    assert "/dashboard" in cache
    assert len(cache) == 3


async def test_revalidate_unknown_path_is_harmless():
    cache = PageCache()
    await _fill(cache)
    await cache.revalidate_path("/nowhere")
    assert len(cache) == len(KEYS)


async def test_entries_expire():
    clock = Clock()
    cache = PageCache(ttl=60, clock=clock)
    await cache.set("/dashboard/invoices?query=a", "html")

    clock.now += 59
    assert await cache.get("/dashboard/invoices?query=a") == "html"
    clock.now += 1
    assert await cache.get("/dashboard/invoices?query=a") is None
    assert len(cache) == 0


async def test_size_is_bounded_least_recently_used_first():
    cache = PageCache(max_entries=3)
    for q in ("a", "b", "c"):
        await cache.set(f"/dashboard/invoices?query={q}", q)
    await cache.get("/dashboard/invoices?query=a")

    for q in range(100):
        await cache.set(f"/dashboard/invoices?query=x{q}", "x")

    assert len(cache) == 3
    assert "/dashboard/invoices?query=a" not in cache

    small = PageCache(max_entries=2)
    await small.set("/one", "1")
    await small.set("/two", "2")
    await small.get("/one")
    await small.set("/three", "3")
    assert "/one" in small
    assert "/two" not in small


async def test_aclose_empties():
    cache = PageCache()
    await _fill(cache)
    await cache.aclose()
    assert len(cache) == 0


def test_size_and_membership_wait_for_writers():
    cache = PageCache()
    seen = []
    readers = [
        threading.Thread(target=lambda: seen.append(len(cache))),
        threading.Thread(target=lambda: seen.append("/x" in cache)),
    ]

    with cache._lock:
        for t in readers:
            t.start()
        for t in readers:
            t.join(timeout=0.2)
        assert seen == []
        cache._pages["/x"] = (float("inf"), "html")

    for t in readers:
        t.join(timeout=5)
    assert len(seen) == 2
    assert all(seen)


# ---- Redis-backed store --------------------------------------------------------

async def test_redis_set_uses_prefix_and_expiry():
    client = FakeRedis()
    cache = RedisPageCache(client, ttl=120)

    await cache.set("/dashboard/invoices?page=2", "html")

    assert client.data == {"billdash:page:/dashboard/invoices?page=2": "html"}
    assert client.expiry == {"billdash:page:/dashboard/invoices?page=2": 120}
    assert await cache.get("/dashboard/invoices?page=2") == "html"


async def test_redis_revalidate_is_seen_by_every_worker():
    client = FakeRedis()
    worker_a, worker_b = RedisPageCache(client), RedisPageCache(client)
    await _fill(worker_b)
    client.data["other-app:/dashboard/invoices"] = "foreign"

    await worker_a.revalidate_path("/dashboard/invoices")

    assert await worker_b.get("/dashboard/invoices") is None
    assert await worker_b.get("/dashboard/invoices?query=amy&page=1") is None
    assert await worker_b.get("/dashboard/invoices-archive") is not None
    assert await worker_b.get("/dashboard/customers") is not None
    assert "other-app:/dashboard/invoices" in client.data


async def test_redis_outage_degrades_to_a_miss():
    client = FakeRedis(fail=True)
    cache = RedisPageCache(client)

    await cache.set("/dashboard/invoices", "html")
    assert await cache.get("/dashboard/invoices") is None
    await cache.revalidate_path("/dashboard/invoices")


async def test_redis_aclose():
    client = FakeRedis()
    await RedisPageCache(client).aclose()
    assert client.closed


async def test_build_page_cache_picks_backend():
    local = build_page_cache(Settings(REDIS_URL=None, PAGE_CACHE_MAX_ENTRIES=10, PAGE_CACHE_TTL=30))
    assert isinstance(local, PageCache)
    assert (local.max_entries, local.ttl) == (10, 30)

    shared = build_page_cache(Settings(REDIS_URL="redis://localhost:6379/3", PAGE_CACHE_TTL=30))
    assert isinstance(shared, RedisPageCache)
    assert shared.ttl == 30
    await shared.aclose()
