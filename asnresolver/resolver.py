"""Multi-source ASN resolution with overrides and a result cache.

The resolver queries its sources in a fixed precedence order and stops at the
first complete (ASN, description) pair:

1. Local MaxMind database
2. Remote ipinfo.io API
3. Team Cymru DNS, only to describe an ASN found by one of the above

An operator override replaces whatever description the sources produced.
Source failures are logged and degrade to the next source; only the total
absence of an ASN is reported to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Optional, Protocol

from .cache import ResultCache
from .errors import (
    IPv6UnsupportedError,
    OverrideNotFoundError,
    OverridesDisabledError,
    PrivateAddressError,
    SourceLookupError,
    UnknownAsnError,
)
from .events import EventKind, Observer, ResolutionEvent
from .ip_classification import AddressInfo, classify, is_local_ip, parse_ip
from .models import OverrideRecord, Resolution
from .overrides import OverrideStore
from .telemetry import start_span

logger = logging.getLogger(__name__)


class LocalSource(Protocol):
    """Best-effort lookup; empty strings mean "not found".

    Errors raised by an implementation are treated like a miss.
    """

    def lookup(self, ip_address: str) -> tuple[str, str]: ...


class RemoteSource(Protocol):
    """Lookup that raises ``SourceLookupError`` on failure."""

    def lookup(self, ip_address: str) -> tuple[str, str]: ...


class DescriptionSource(Protocol):
    """ASN description lookup that raises ``SourceLookupError`` on failure."""

    def lookup(self, asn: str) -> str: ...


@dataclass
class ResolverStats:
    """Statistics for resolution operations.

    Attributes:
        total: Number of resolve() calls that passed input validation
        cache_hits: Fresh answers served from the cache
        cache_misses: Addresses absent from the cache
        stale_refreshes: Expired cache entries that triggered a new resolution
        source_hits: Complete or partial answers per source name
        source_failures: Failed lookups per source name
        overrides_applied: Resolutions whose description came from an override
        unknown_asn: Resolutions that found no ASN at all
    """

    total: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    stale_refreshes: int = 0
    source_hits: dict[str, int] = field(default_factory=dict)
    source_failures: dict[str, int] = field(default_factory=dict)
    overrides_applied: int = 0
    unknown_asn: int = 0


class AsnResolver:
    """Resolve IPv4 addresses to (ASN, description) pairs.

    Attributes:
        local: Offline database client (MaxMind)
        remote: Remote HTTP client (ipinfo.io)
        descriptions: ASN description client (Team Cymru DNS)
        overrides: Override store; a store without a database disables overrides
        cache: Result cache shared by every call on this resolver

    Example:
        >>> resolver = AsnResolver(maxmind, ipinfo, cymru)
        >>> result = resolver.resolve("8.8.8.8")
        >>> print(result.asn, result.description)
        AS15169 GOOGLE
    """

    def __init__(
        self,
        local: LocalSource,
        remote: RemoteSource,
        descriptions: DescriptionSource,
        overrides: Optional[OverrideStore] = None,
        cache: Optional[ResultCache] = None,
        observer: Optional[Observer] = None,
    ) -> None:
        """Initialize the resolver with its collaborators.

        Args:
            local: Client answering ``lookup(ip) -> (asn, org)`` without raising
            remote: Client answering ``lookup(ip) -> (asn, org)``
            descriptions: Client answering ``lookup(asn) -> org``
            overrides: Override store, or None to disable overrides
            cache: Result cache, or None for a fresh cache with the default TTL
            observer: Optional callback receiving ResolutionEvent objects
        """
        self.local = local
        self.remote = remote
        self.descriptions = descriptions
        self.overrides = overrides if overrides is not None else OverrideStore()
        self.cache = cache if cache is not None else ResultCache()
        self.observer = observer
        self._stats = ResolverStats()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, ip_address: str) -> Resolution:
        """Resolve the ASN and description of an IPv4 address.

        Args:
            ip_address: IPv4 literal

        Returns:
            Resolution with the ASN, its description and the answering source

        Raises:
            MalformedAddressError: If ip_address is not an IP literal
            IPv6UnsupportedError: If ip_address is an IPv6 address
            PrivateAddressError: If ip_address is not globally routable
            UnknownAsnError: If no source produced an ASN
        """
        info = self._validate(ip_address)
        ip = info.address
        self._stats.total += 1

        cached = self.cache.lookup_by_ip(ip)
        if cached.found and not cached.expired:
            self._stats.cache_hits += 1
            self._emit(EventKind.CACHE_HIT, ip, asn=cached.asn)
            return Resolution(asn=cached.asn, description=cached.description, source="cache", cached=True)

        if cached.found:
            logger.info(f"Cache entry expired for {ip}")
            self._stats.stale_refreshes += 1
            self._emit(EventKind.CACHE_STALE, ip, asn=cached.asn)
        else:
            logger.info(f"Cache miss for {ip}")
            self._stats.cache_misses += 1
            self._emit(EventKind.CACHE_MISS, ip)

        with start_span("asn_resolver.resolve", {"net.peer.ip": ip, "asn_resolver.stale": cached.found}):
            result = self._resolve_uncached(ip)

        self.cache.store(ip, result.asn, result.description)
        return result

    def _validate(self, ip_address: str) -> AddressInfo:
        info = classify(ip_address)
        if not info.is_ipv4:
            raise IPv6UnsupportedError(ip_address)
        if info.is_local:
            raise PrivateAddressError(ip_address)
        return info

    def _resolve_uncached(self, ip: str) -> Resolution:
        # Step 1: local database, authoritative when complete
        try:
            local_asn, local_descr = self.local.lookup(ip)
        except Exception as e:
            self._source_failed(ip, "maxmind", e)
            local_asn, local_descr = "", ""
        if local_asn and local_descr:
            self._count_hit("maxmind")
            return self._finish(ip, local_asn, local_descr, "maxmind")
        if not local_asn:
            logger.warning(f"MaxMind lookup found no ASN for {ip}")

        # Step 2: remote API, authoritative when complete
        remote_asn = ""
        try:
            remote_asn, remote_descr = self.remote.lookup(ip)
        except SourceLookupError as e:
            self._source_failed(ip, "ipinfo", e, asn=local_asn or None)
        else:
            if remote_asn and remote_descr:
                self._count_hit("ipinfo")
                return self._finish(ip, remote_asn, remote_descr, "ipinfo")

        # Step 3: bare ASN, local preferred, described through DNS
        if local_asn:
            asn, origin = local_asn, "maxmind"
        elif remote_asn:
            asn, origin = remote_asn, "ipinfo"
        else:
            self._stats.unknown_asn += 1
            self._emit(EventKind.UNKNOWN_ASN, ip)
            raise UnknownAsnError(ip)

        self._count_hit(origin)
        try:
            descr = self.descriptions.lookup(asn)
        except SourceLookupError as e:
            self._source_failed(ip, "cymru", e, asn=asn)
            descr = ""
        else:
            self._count_hit("cymru")
        return self._finish(ip, asn, descr, f"{origin}+cymru")

    def _finish(self, ip: str, asn: str, descr: str, source: str) -> Resolution:
        return Resolution(asn=asn, description=self._overridden_description(ip, asn, descr), source=source)

    def _overridden_description(self, ip: str, asn: str, fallback: str) -> str:
        """Return the override for ``asn`` if one exists, else ``fallback``."""
        try:
            descr = self.overrides.lookup(asn)
        except (OverridesDisabledError, OverrideNotFoundError):
            return fallback
        except Exception as e:
            logger.warning(f"Override lookup failed for {asn}: {e}")
            self._emit(EventKind.OVERRIDE_FALLBACK, ip, asn=asn, source="overrides", detail=str(e))
            return fallback

        self._stats.overrides_applied += 1
        self._emit(EventKind.OVERRIDE_APPLIED, ip, asn=asn, source="overrides", detail=descr)
        return descr

    def _count_hit(self, source: str) -> None:
        self._stats.source_hits[source] = self._stats.source_hits.get(source, 0) + 1

    def _source_failed(self, ip: str, source: str, error: Exception, asn: Optional[str] = None) -> None:
        logger.warning(f"{source} lookup failed for {ip}: {error}")
        self._stats.source_failures[source] = self._stats.source_failures.get(source, 0) + 1
        self._emit(EventKind.SOURCE_FAILURE, ip, asn=asn, source=source, detail=str(error))

    def _emit(
        self,
        kind: EventKind,
        ip: str,
        asn: Optional[str] = None,
        source: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        if self.observer is None:
            return
        try:
            self.observer(ResolutionEvent(kind=kind, ip=ip, asn=asn, source=source, detail=detail))
        except Exception as e:
            logger.error(f"Resolution observer failed on {kind.value} for {ip}: {e}")

    # ------------------------------------------------------------------
    # Direct source lookups
    # ------------------------------------------------------------------

    def local_lookup(self, ip_address: str) -> tuple[str, str]:
        """Query only the local database.

        Non-IPv4, malformed and local addresses answer ``("", "")``.
        """
        parsed, ipv4 = parse_ip(ip_address)
        if not ipv4 or is_local_ip(parsed):
            return "", ""
        return self.local.lookup(str(parsed))

    def remote_lookup(self, ip_address: str) -> tuple[str, str]:
        """Query only the remote API.

        Raises:
            MalformedAddressError, IPv6UnsupportedError, PrivateAddressError: On invalid input
            SourceLookupError: If the remote API fails
        """
        info = self._validate(ip_address)
        return self.remote.lookup(info.address)

    def description_lookup(self, asn: str) -> str:
        """Query only the description source.

        Raises:
            SourceLookupError: If the DNS lookup fails
        """
        return self.descriptions.lookup(asn)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def purge_cache(self) -> None:
        """Erase every cached resolution."""
        logger.info("Purging ASN cache")
        self.cache.purge_all()

    def purge_asn(self, asn: str) -> None:
        """Erase cached resolutions for one ASN."""
        removed = self.cache.purge_asn(asn)
        logger.info(f"Purged {removed} cached addresses for {asn}")

    def ips_for_asn(self, asn: str) -> list[str]:
        """Return the cached addresses that resolved to ``asn``."""
        return sorted(self.cache.lookup_by_asn(asn))

    def cached_asns(self) -> list[str]:
        """Return every ASN currently present in the cache."""
        return sorted(self.cache.list_asns())

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def override_lookup(self, asn: str) -> str:
        """Return the override description of ``asn``."""
        return self.overrides.lookup(asn)

    def override_set(self, asn: str, description: str) -> None:
        """Store an override and drop cached answers for ``asn``."""
        self.overrides.set(asn, description)
        self.cache.purge_asn(asn)

    def override_remove(self, asn: str) -> None:
        """Remove an override and drop cached answers for ``asn``."""
        self.overrides.remove(asn)
        self.cache.purge_asn(asn)

    def override_list(self) -> list[OverrideRecord]:
        """Return every override."""
        return self.overrides.list_all()

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_stats(self) -> ResolverStats:
        """Get resolution statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset resolution statistics."""
        self._stats = ResolverStats()

    def stats_summary(self) -> dict[str, object]:
        """Return resolver, cache and source counters as plain data."""
        summary: dict[str, object] = {"resolver": asdict(self._stats), "cache": self.cache.snapshot()}
        for name, client in (("maxmind", self.local), ("ipinfo", self.remote), ("cymru", self.descriptions)):
            get_stats = getattr(client, "get_stats", None)
            if callable(get_stats):
                summary[name] = get_stats()
        return summary


__all__ = ["AsnResolver", "ResolverStats"]
