"""Data sources queried by the resolver, in precedence order."""

from .cymru_client import CymruClient
from .ipinfo_client import IpInfoClient
from .maxmind_client import MaxMindClient

__all__ = ["MaxMindClient", "IpInfoClient", "CymruClient"]
