"""Parse textual IP addresses and flag non globally routable ones.

Hostnames are never resolved here; only IPv4 and IPv6 literals are accepted.
The range tables are loaded once at import time into PyTricia prefix trees, so a
lookup is a single longest-prefix match.
"""

from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Optional

from ..errors import MalformedAddressError
from .models import AddressInfo, IPAddress
from .ranges import NON_GLOBAL_IPV4_TRIE, NON_GLOBAL_IPV6_TRIE


def parse_ip(text: str) -> tuple[Optional[IPAddress], bool]:
    """Parse an IP literal.

    IPv4-mapped IPv6 addresses are unwrapped to their IPv4 form.

    Args:
        text: Candidate address

    Returns:
        Tuple of (parsed address or None, True if the address is IPv4)
    """
    candidate = text.strip() if isinstance(text, str) else ""
    if not candidate or "%" in candidate:
        return None, False
    try:
        parsed = ip_address(candidate)
    except ValueError:
        return None, False
    if isinstance(parsed, IPv6Address) and parsed.ipv4_mapped is not None:
        parsed = parsed.ipv4_mapped
    return parsed, isinstance(parsed, IPv4Address)


def is_local_ip(address: Optional[IPAddress]) -> bool:
    """Tell if an address is not forwardable across networks.

    A missing address counts as local.
    """
    if address is None:
        return True
    if isinstance(address, IPv4Address):
        return str(address) in NON_GLOBAL_IPV4_TRIE
    return str(address) in NON_GLOBAL_IPV6_TRIE


def is_ip(text: str) -> bool:
    """Tell if a string is an IP address."""
    return parse_ip(text)[0] is not None


def is_ipv4(text: str) -> bool:
    """Tell if a string is an IPv4 address."""
    return parse_ip(text)[1]


def is_ipv6(text: str) -> bool:
    """Tell if a string is an IPv6 address."""
    parsed, ipv4 = parse_ip(text)
    return parsed is not None and not ipv4


def classify(text: str) -> AddressInfo:
    """Classify a textual address.

    Args:
        text: IPv4 or IPv6 literal

    Returns:
        AddressInfo with the canonical address, its family and locality

    Raises:
        MalformedAddressError: If text is not an IP literal
    """
    parsed, ipv4 = parse_ip(text)
    if parsed is None:
        raise MalformedAddressError(text)
    return AddressInfo(address=str(parsed), is_ipv4=ipv4, is_local=is_local_ip(parsed))


__all__ = ["classify", "parse_ip", "is_local_ip", "is_ip", "is_ipv4", "is_ipv6"]
