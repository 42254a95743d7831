"""Exception taxonomy for ASN resolution.

Input errors are raised straight to the caller. Source errors are recovered
inside the resolver by falling through to the next source; only the total
absence of an ASN surfaces, as ``UnknownAsnError``. Override errors other than
"not found" and "disabled" are logged and treated as "no override".
"""

from __future__ import annotations


class AsnResolverError(Exception):
    """Base class for all errors raised by asnresolver."""


class InvalidAddressError(AsnResolverError, ValueError):
    """The address given to a lookup cannot be resolved."""

    def __init__(self, address: str, message: str) -> None:
        super().__init__(f"{message}: {address!r}")
        self.address = address


class MalformedAddressError(InvalidAddressError):
    """Input does not parse as an IPv4 or IPv6 literal."""

    def __init__(self, address: str) -> None:
        super().__init__(address, "malformed IP address")


class PrivateAddressError(InvalidAddressError):
    """Input is inside a non globally routable special-purpose range."""

    def __init__(self, address: str) -> None:
        super().__init__(address, "private IP address")


class IPv6UnsupportedError(InvalidAddressError):
    """Input is an IPv6 address."""

    def __init__(self, address: str) -> None:
        super().__init__(address, "IPv6 not yet supported")


class UnknownAsnError(AsnResolverError, LookupError):
    """No source produced an ASN for the address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"unknown ASN for ip {address!r}")
        self.address = address


class SourceLookupError(AsnResolverError):
    """A single data source failed to answer."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class OverridesDisabledError(AsnResolverError):
    """The resolver was built without an override store."""

    def __init__(self) -> None:
        super().__init__("nil overrides collection")


class OverrideNotFoundError(AsnResolverError, LookupError):
    """No override is defined for the ASN."""

    def __init__(self, asn: str) -> None:
        super().__init__(f"ASN not found: {asn}")
        self.asn = asn


class MalformedAsnError(AsnResolverError, ValueError):
    """Identifier does not match ``AS<digits>``."""

    def __init__(self, asn: str) -> None:
        super().__init__(f"malformed ASN identifier: {asn!r}")
        self.asn = asn


class OverrideStoreError(AsnResolverError):
    """The backing override database failed."""


__all__ = [
    "AsnResolverError",
    "InvalidAddressError",
    "MalformedAddressError",
    "PrivateAddressError",
    "IPv6UnsupportedError",
    "UnknownAsnError",
    "SourceLookupError",
    "OverridesDisabledError",
    "OverrideNotFoundError",
    "MalformedAsnError",
    "OverrideStoreError",
]
