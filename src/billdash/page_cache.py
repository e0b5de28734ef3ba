# src/billdash/page_cache.py
from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Protocol, Tuple
from urllib.parse import urlsplit

import redis.asyncio as redis
from redis.exceptions import RedisError

from billdash.app_logger import get_logger
from billdash.core.config import Settings

log = get_logger("page_cache")

DEFAULT_TTL_SEC = 300
DEFAULT_MAX_ENTRIES = 512
REDIS_PREFIX = "billdash:page:"


def _path_of(key: str) -> str:
    return urlsplit(key).path.rstrip("/") or "/"


def _is_under(key: str, path: str) -> bool:
    root = path.rstrip("/") or "/"
    prefix = root if root.endswith("/") else root + "/"
    p = _path_of(key)
    return p == root or p.startswith(prefix)


def key_for(path: str, query: str = "") -> str:
    return f"{path}?{query}" if query else path


class PageStore(Protocol):
    """Rendered listing fragments keyed by path plus query string.

    Also the notification port handed to mutations: a successful write
    calls ``revalidate_path`` for every listing it touches.
    """

    def key_for(self, path: str, query: str = "") -> str: ...

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, html: str) -> None: ...

    async def revalidate_path(self, path: str) -> None: ...

    async def aclose(self) -> None: ...


class PageCache:
    """In-process store, bounded by entry count (LRU) and age.

    Only coherent within a single process; run one worker or use
    ``RedisPageCache``.
    """

    key_for = staticmethod(key_for)

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl: float = DEFAULT_TTL_SEC,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        self._pages: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()
        self._lock = threading.Lock()

    def _live(self, key: str) -> Optional[str]:
        # caller holds the lock
        hit = self._pages.get(key)
        if hit is None:
            return None
        expires, html = hit
        if expires <= self._clock():
            del self._pages[key]
            return None
        self._pages.move_to_end(key)
        return html

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._live(key)

    async def set(self, key: str, html: str) -> None:
        with self._lock:
            self._pages[key] = (self._clock() + self.ttl, html)
            self._pages.move_to_end(key)
            while len(self._pages) > self.max_entries:
                self._pages.popitem(last=False)

    async def revalidate_path(self, path: str) -> None:
        with self._lock:
            stale = [k for k in self._pages if _is_under(k, path)]
            for k in stale:
                del self._pages[k]
        log.debug("revalidated %s (%d cached page(s) dropped)", path, len(stale))

    async def aclose(self) -> None:
        self.clear()

    def clear(self) -> None:
        with self._lock:
            self._pages.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pages)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return self._live(key) is not None


class RedisPageCache:
    """Store shared by every worker: one Redis string per page, with expiry.

    Redis errors degrade to a cache miss; the expiry bounds how long a
    page can outlive a failed revalidation.
    """

    key_for = staticmethod(key_for)

    def __init__(
        self,
        client: "redis.Redis",
        *,
        prefix: str = REDIS_PREFIX,
        ttl: int = DEFAULT_TTL_SEC,
    ) -> None:
        self._r = client
        self._p = prefix
        self.ttl = ttl

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisPageCache":
        log.info("RedisPageCache initialized: url=%s", url)
        return cls(redis.from_url(url, decode_responses=True), **kwargs)

    def _k(self, key: str) -> str:
        return f"{self._p}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._r.get(self._k(key))
        except RedisError:
            log.exception("page cache GET failed for %s", key)
            return None

    async def set(self, key: str, html: str) -> None:
        try:
            await self._r.set(self._k(key), html, ex=self.ttl)
        except RedisError:
            log.exception("page cache SET failed for %s", key)

    async def revalidate_path(self, path: str) -> None:
        try:
            stale = [
                full
                async for full in self._r.scan_iter(match=f"{self._p}*", count=500)
                if _is_under(full[len(self._p):], path)
            ]
            if stale:
                await self._r.delete(*stale)
        except RedisError:
            log.exception("page cache revalidation failed for %s", path)
            return
        log.debug("revalidated %s (%d cached page(s) dropped)", path, len(stale))

    async def aclose(self) -> None:
        await self._r.aclose()


def build_page_cache(cfg: Settings) -> PageStore:
    if cfg.REDIS_URL:
        return RedisPageCache.from_url(cfg.REDIS_URL, ttl=cfg.PAGE_CACHE_TTL)
    return PageCache(max_entries=cfg.PAGE_CACHE_MAX_ENTRIES, ttl=cfg.PAGE_CACHE_TTL)
