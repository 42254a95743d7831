"""Resolve the ASN and organization of IPv4 addresses from several sources."""

from importlib.metadata import PackageNotFoundError, version

from .cache import ResultCache
from .errors import (
    AsnResolverError,
    InvalidAddressError,
    IPv6UnsupportedError,
    MalformedAddressError,
    MalformedAsnError,
    OverrideNotFoundError,
    OverridesDisabledError,
    OverrideStoreError,
    PrivateAddressError,
    SourceLookupError,
    UnknownAsnError,
)
from .events import EventKind, ResolutionEvent
from .factory import create_resolver
from .models import OverrideRecord, Resolution
from .overrides import OverrideStore
from .resolver import AsnResolver, ResolverStats
from .settings import ResolverSettings

__all__ = [
    "AsnResolver",
    "AsnResolverError",
    "EventKind",
    "InvalidAddressError",
    "IPv6UnsupportedError",
    "MalformedAddressError",
    "MalformedAsnError",
    "OverrideNotFoundError",
    "OverrideRecord",
    "OverridesDisabledError",
    "OverrideStore",
    "OverrideStoreError",
    "PrivateAddressError",
    "Resolution",
    "ResolutionEvent",
    "ResolverSettings",
    "ResolverStats",
    "ResultCache",
    "SourceLookupError",
    "UnknownAsnError",
    "create_resolver",
    "get_version",
]


def get_version() -> str:
    """Return the installed package version or a development marker."""
    try:
        return version("asnresolver")
    except PackageNotFoundError:
        return "0.0.0-dev"
