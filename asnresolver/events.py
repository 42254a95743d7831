"""Resolution events delivered to an optional observer callback."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class EventKind(str, Enum):
    """Notable steps of a resolution."""

    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    CACHE_STALE = "cache_stale"
    SOURCE_FAILURE = "source_failure"
    OVERRIDE_APPLIED = "override_applied"
    OVERRIDE_FALLBACK = "override_fallback"
    UNKNOWN_ASN = "unknown_asn"


@dataclass(slots=True, frozen=True)
class ResolutionEvent:
    """One observed step of a resolution.

    Attributes:
        kind: What happened
        ip: Normalized address being resolved
        asn: ASN involved, if known at that point
        source: Source client involved ("maxmind", "ipinfo", "cymru", "overrides")
        detail: Free-form context such as the error message
    """

    kind: EventKind
    ip: str
    asn: Optional[str] = None
    source: Optional[str] = None
    detail: Optional[str] = None


Observer = Callable[[ResolutionEvent], None]


__all__ = ["EventKind", "ResolutionEvent", "Observer"]
