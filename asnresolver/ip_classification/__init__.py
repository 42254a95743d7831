"""Address classification for ASN resolution.

Example:
    >>> from asnresolver.ip_classification import classify
    >>> info = classify("8.8.8.8")
    >>> info.is_ipv4, info.is_local
    (True, False)
"""

from .classifier import classify, is_ip, is_ipv4, is_ipv6, is_local_ip, parse_ip
from .models import AddressInfo

__all__ = [
    "AddressInfo",
    "classify",
    "is_ip",
    "is_ipv4",
    "is_ipv6",
    "is_local_ip",
    "parse_ip",
]
