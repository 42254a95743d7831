"""Unit tests for address classification."""

from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address

import pytest

from asnresolver.errors import InvalidAddressError, MalformedAddressError
from asnresolver.ip_classification import (
    AddressInfo,
    classify,
    is_ip,
    is_ipv4,
    is_ipv6,
    is_local_ip,
    parse_ip,
)
from asnresolver.ip_classification.ranges import (
    NON_GLOBAL_IPV4_CIDRS,
    NON_GLOBAL_IPV4_TRIE,
    NON_GLOBAL_IPV6_CIDRS,
    NON_GLOBAL_IPV6_TRIE,
)


class TestParseIp:
    """Test parse_ip()."""

    def test_ipv4(self) -> None:
        """Dotted quads parse as IPv4."""
        address, ipv4 = parse_ip("8.8.8.8")
        assert address == IPv4Address("8.8.8.8")
        assert ipv4 is True

    def test_ipv6(self) -> None:
        """IPv6 literals parse and are flagged non IPv4."""
        address, ipv4 = parse_ip("2001:4860:4860::8888")
        assert address == IPv6Address("2001:4860:4860::8888")
        assert ipv4 is False

    def test_ipv4_mapped_ipv6_is_unwrapped(self) -> None:
        """::ffff:a.b.c.d is reported as the embedded IPv4 address."""
        address, ipv4 = parse_ip("::ffff:8.8.4.4")
        assert address == IPv4Address("8.8.4.4")
        assert ipv4 is True

    def test_whitespace_is_stripped(self) -> None:
        """Surrounding whitespace is ignored."""
        address, ipv4 = parse_ip("  1.1.1.1\n")
        assert address == IPv4Address("1.1.1.1")
        assert ipv4 is True

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "not-an-ip", "example.com", "256.1.1.1", "1.2.3", "fe80::1%eth0", "1.2.3.4/24"],
    )
    def test_invalid_input(self, text: str) -> None:
        """Hostnames, partial or scoped literals are rejected."""
        assert parse_ip(text) == (None, False)


class TestPredicates:
    """Test is_ip(), is_ipv4(), is_ipv6() and is_local_ip()."""

    def test_is_ip(self) -> None:
        assert is_ip("8.8.8.8")
        assert is_ip("::1")
        assert not is_ip("localhost")

    def test_is_ipv4(self) -> None:
        assert is_ipv4("8.8.8.8")
        assert not is_ipv4("2001:4860:4860::8888")
        assert not is_ipv4("garbage")

    def test_is_ipv6(self) -> None:
        assert is_ipv6("2001:4860:4860::8888")
        assert not is_ipv6("8.8.8.8")
        assert not is_ipv6("garbage")

    def test_missing_address_is_local(self) -> None:
        """A missing address cannot be routed and counts as local."""
        assert is_local_ip(None) is True

    @pytest.mark.parametrize(
        "text",
        [
            "127.0.0.1",
            "10.1.2.3",
            "172.16.0.1",
            "172.31.255.255",
            "192.168.0.1",
            "169.254.10.10",
            "100.64.0.1",
            "192.0.2.1",
            "198.51.100.7",
            "203.0.113.99",
            "198.19.0.1",
            "0.1.2.3",
            "240.0.0.1",
            "255.255.255.255",
        ],
    )
    def test_local_ipv4(self, text: str) -> None:
        """Addresses inside non-global IPv4 ranges are local."""
        assert is_local_ip(parse_ip(text)[0]) is True

    @pytest.mark.parametrize("text", ["::1", "::", "fd00::1", "fe80::1", "2001:db8::1", "2001::1", "100::1"])
    def test_local_ipv6(self, text: str) -> None:
        """Addresses inside non-global IPv6 ranges are local."""
        assert is_local_ip(parse_ip(text)[0]) is True

    @pytest.mark.parametrize("text", ["8.8.8.8", "1.1.1.1", "172.32.0.1", "2001:4860:4860::8888"])
    def test_global_addresses(self, text: str) -> None:
        """Globally routable addresses are not local."""
        assert is_local_ip(parse_ip(text)[0]) is False


class TestClassify:
    """Test classify()."""

    def test_global_ipv4(self) -> None:
        assert classify("8.8.8.8") == AddressInfo(address="8.8.8.8", is_ipv4=True, is_local=False)

    def test_private_ipv4(self) -> None:
        assert classify("192.168.0.1") == AddressInfo(address="192.168.0.1", is_ipv4=True, is_local=True)

    def test_ipv6_is_normalized(self) -> None:
        """IPv6 input is reported in canonical compressed form."""
        info = classify("2001:4860:4860:0000:0000:0000:0000:8888")
        assert info.address == "2001:4860:4860::8888"
        assert info.is_ipv4 is False
        assert info.is_local is False

    def test_malformed(self) -> None:
        """Non literals raise MalformedAddressError, a ValueError."""
        with pytest.raises(MalformedAddressError) as exc_info:
            classify("not-an-ip")
        assert isinstance(exc_info.value, InvalidAddressError)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.address == "not-an-ip"
        assert "malformed IP address" in str(exc_info.value)


class TestRangeTables:
    """The static tables load once into prefix trees."""

    def test_tables_loaded(self) -> None:
        assert len(NON_GLOBAL_IPV4_TRIE) == len(NON_GLOBAL_IPV4_CIDRS) == 14
        assert len(NON_GLOBAL_IPV6_TRIE) == len(NON_GLOBAL_IPV6_CIDRS) == 10
        assert all(NON_GLOBAL_IPV4_TRIE.has_key(cidr) for cidr in NON_GLOBAL_IPV4_CIDRS)
        assert all(NON_GLOBAL_IPV6_TRIE.has_key(cidr) for cidr in NON_GLOBAL_IPV6_CIDRS)

    @pytest.mark.parametrize(
        ("trie", "address", "prefix"),
        [
            (NON_GLOBAL_IPV4_TRIE, "10.20.30.40", "10.0.0.0/8"),
            (NON_GLOBAL_IPV4_TRIE, "198.19.255.1", "198.18.0.0/15"),
            (NON_GLOBAL_IPV6_TRIE, "2001:db8::1", "2001:db8::/32"),
            (NON_GLOBAL_IPV6_TRIE, "2001:2::5", "2001:2::/48"),
        ],
    )
    def test_longest_prefix_match(self, trie, address: str, prefix: str) -> None:
        """Containment resolves to the most specific covering range."""
        assert address in trie
        assert trie.get_key(address) == prefix

    def test_global_addresses_absent(self) -> None:
        assert "8.8.8.8" not in NON_GLOBAL_IPV4_TRIE
        assert "2001:4860:4860::8888" not in NON_GLOBAL_IPV6_TRIE
