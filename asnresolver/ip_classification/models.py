"""Data models for address classification."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address
from typing import Union

IPAddress = Union[IPv4Address, IPv6Address]


@dataclass(slots=True, frozen=True)
class AddressInfo:
    """Immutable classification of a textual IP address.

    Attributes:
        address: Canonical text form of the address (IPv4-mapped IPv6 input is
            reported in its dotted IPv4 form)
        is_ipv4: True if the address belongs to the IPv4 family
        is_local: True if the address is inside a non globally routable
            special-purpose range of its family

    Example:
        >>> from asnresolver.ip_classification import classify
        >>> classify("192.168.0.1")
        AddressInfo(address='192.168.0.1', is_ipv4=True, is_local=True)
    """

    address: str
    is_ipv4: bool
    is_local: bool
