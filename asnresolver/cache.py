"""In-memory result cache for ASN resolutions.

The cache keeps two indices that must always agree:

- forward: IP address -> CacheEntry (asn, description, expiry)
- reverse: ASN -> set of IP addresses currently cached under that ASN

An IP appears in the reverse bucket of ASN X if and only if its forward entry
carries ASN X. Every mutation updates both indices under one exclusive lock;
reads share the lock.

Expiry is advisory: entries are never evicted on age. ``lookup_by_ip`` reports
``expired=True`` and lets the caller decide whether to refresh.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Iterator, NamedTuple, Set

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """Cached resolution for one IP address.

    Attributes:
        asn: ASN identifier (``AS<digits>``)
        description: Organization name, possibly empty
        expires_at: Epoch timestamp after which the entry is stale
    """

    asn: str
    description: str
    expires_at: float


class CacheLookup(NamedTuple):
    """Answer of ``ResultCache.lookup_by_ip``."""

    asn: str
    description: str
    expired: bool
    found: bool


_MISSING = CacheLookup("", "", False, False)


class _ReadWriteLock:
    """Many readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            # Pending writers take priority over new readers
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ResultCache:
    """Bidirectional IP <-> ASN cache with a fixed TTL.

    Instances are owned by a resolver; nothing here is process global, so tests
    can build as many independent caches as they need.

    Example:
        >>> cache = ResultCache()
        >>> cache.store("8.8.8.8", "AS15169", "Google Inc.")
        >>> cache.lookup_by_ip("8.8.8.8")
        CacheLookup(asn='AS15169', description='Google Inc.', expired=False, found=True)
        >>> cache.lookup_by_asn("AS15169")
        {'8.8.8.8'}
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Callable[[], float] = time.time) -> None:
        """Initialize an empty cache.

        Args:
            ttl: Lifetime of an entry before it is reported as expired
            clock: Callable returning the current epoch timestamp
        """
        if ttl.total_seconds() <= 0:
            raise ValueError(f"cache TTL must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._lock = _ReadWriteLock()
        self._by_ip: Dict[str, CacheEntry] = {}
        self._by_asn: Dict[str, Set[str]] = {}
        self._stats_lock = threading.Lock()
        self.stats: Dict[str, int] = {"hits": 0, "misses": 0, "expired": 0, "stores": 0, "purges": 0}

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self.stats[key] += 1

    def lookup_by_ip(self, ip: str) -> CacheLookup:
        """Retrieve cached data by IP address.

        Expired entries are still returned, flagged with ``expired=True``.
        """
        with self._lock.read():
            entry = self._by_ip.get(ip)
        if entry is None:
            self._count("misses")
            return _MISSING
        expired = self._clock() > entry.expires_at
        self._count("expired" if expired else "hits")
        return CacheLookup(entry.asn, entry.description, expired, True)

    def store(self, ip: str, asn: str, description: str) -> None:
        """Insert or overwrite the entry for ``ip``.

        The IP is first removed from every reverse bucket it occupies, and
        buckets left empty are dropped, before it is filed under ``asn``.
        """
        expires_at = self._clock() + self.ttl.total_seconds()
        with self._lock.write():
            emptied = []
            for bucket_asn, ips in self._by_asn.items():
                ips.discard(ip)
                if not ips:
                    emptied.append(bucket_asn)
            for bucket_asn in emptied:
                del self._by_asn[bucket_asn]

            self._by_ip[ip] = CacheEntry(asn=asn, description=description, expires_at=expires_at)
            self._by_asn.setdefault(asn, set()).add(ip)
        self._count("stores")

    def lookup_by_asn(self, asn: str) -> Set[str]:
        """Return the IPs cached under ``asn``; empty set if unknown."""
        with self._lock.read():
            return set(self._by_asn.get(asn, ()))

    def purge_asn(self, asn: str) -> int:
        """Remove every entry resolved to ``asn``.

        Returns:
            Number of IP entries removed
        """
        with self._lock.write():
            doomed = [ip for ip, entry in self._by_ip.items() if entry.asn == asn]
            for ip in doomed:
                del self._by_ip[ip]
            self._by_asn.pop(asn, None)
        self._count("purges")
        logger.debug(f"Purged {len(doomed)} cached IPs for {asn}")
        return len(doomed)

    def purge_all(self) -> None:
        """Remove all entries from both indices."""
        with self._lock.write():
            self._by_ip.clear()
            self._by_asn.clear()
        self._count("purges")

    def list_asns(self) -> list[str]:
        """Return every ASN with at least one cached IP."""
        with self._lock.read():
            return list(self._by_asn)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._by_ip)

    def snapshot(self) -> Dict[str, int]:
        """Return a copy of the cache counters."""
        with self._stats_lock:
            return dict(self.stats)


__all__ = ["CacheEntry", "CacheLookup", "ResultCache", "DEFAULT_TTL"]
