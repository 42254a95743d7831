"""Value types shared across the resolver, its sources and the override store."""

from __future__ import annotations

import re
from dataclasses import dataclass

ASN_PATTERN = re.compile(r"^AS[0-9]+$")


def is_asn(value: str | None) -> bool:
    """Tell if ``value`` is an ASN identifier of the form ``AS<digits>``."""
    return value is not None and ASN_PATTERN.fullmatch(value) is not None


def format_asn(number: int) -> str:
    """Format a numeric ASN as an identifier.

    Example:
        >>> format_asn(15169)
        'AS15169'
    """
    return f"AS{number}"


@dataclass(slots=True, frozen=True)
class Resolution:
    """Outcome of a successful ASN resolution.

    Attributes:
        asn: ASN identifier
        description: Organization name after override precedence; may be empty
        source: Which sources produced the pair ("maxmind", "ipinfo",
            "maxmind+cymru", "ipinfo+cymru"), or "cache"
        cached: True if the answer was served from the result cache
    """

    asn: str
    description: str
    source: str
    cached: bool = False


@dataclass(slots=True, frozen=True)
class OverrideRecord:
    """One locally managed ASN description."""

    asn: str
    name: str


__all__ = ["ASN_PATTERN", "is_asn", "format_asn", "Resolution", "OverrideRecord"]
