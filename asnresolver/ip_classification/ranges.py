"""IANA special-purpose address registries, restricted to entries where Global is false.

IPv4: http://www.iana.org/assignments/iana-ipv4-special-registry/
IPv6: http://www.iana.org/assignments/iana-ipv6-special-registry/
"""

from __future__ import annotations

from typing import Any

import pytricia  # type: ignore

NON_GLOBAL_IPV4_CIDRS: tuple[str, ...] = (
    "127.0.0.0/8",  # Loopback, RFC1122
    "192.168.0.0/16",  # Private-Use, RFC1918
    "10.0.0.0/8",  # Private-Use, RFC1918
    "172.16.0.0/12",  # Private-Use, RFC1918
    "0.0.0.0/8",  # "This host on this network", RFC1122 section 3.2.1.3
    "100.64.0.0/10",  # Shared Address Space, RFC6598
    "169.254.0.0/16",  # Link Local, RFC3927
    "192.0.0.0/24",  # IETF Protocol Assignments, RFC6890
    "192.0.2.0/24",  # Documentation (TEST-NET-1), RFC5737
    "198.18.0.0/15",  # Benchmarking, RFC2544
    "198.51.100.0/24",  # Documentation (TEST-NET-2), RFC5737
    "203.0.113.0/24",  # Documentation (TEST-NET-3), RFC5737
    "240.0.0.0/4",  # Reserved, RFC1112
    "255.255.255.255/32",  # Limited Broadcast, RFC919
)

NON_GLOBAL_IPV6_CIDRS: tuple[str, ...] = (
    "::1/128",  # Loopback Address, RFC4291
    "fc00::/7",  # Unique-Local, RFC4193
    "::ffff:0:0/96",  # IPv4-mapped Address, RFC4291
    "fe80::/10",  # Linked-Scoped Unicast, RFC4291
    "::/128",  # Unspecified Address, RFC4291
    "2001::/23",  # IETF Protocol Assignments, RFC2928
    "2001:db8::/32",  # Documentation, RFC3849
    "2001:2::/48",  # Benchmarking, RFC5180
    "2001::/32",  # TEREDO, RFC4380
    "100::/64",  # Discard-Only Address Block, RFC6666
)


def _build_trie(bits: int, cidrs: tuple[str, ...]) -> Any:
    """Load a CIDR table into a PyTricia prefix tree."""
    trie = pytricia.PyTricia(bits)
    for cidr in cidrs:
        trie[cidr] = cidr
    return trie


NON_GLOBAL_IPV4_TRIE: Any = _build_trie(32, NON_GLOBAL_IPV4_CIDRS)
NON_GLOBAL_IPV6_TRIE: Any = _build_trie(128, NON_GLOBAL_IPV6_CIDRS)

__all__ = [
    "NON_GLOBAL_IPV4_CIDRS",
    "NON_GLOBAL_IPV6_CIDRS",
    "NON_GLOBAL_IPV4_TRIE",
    "NON_GLOBAL_IPV6_TRIE",
]
