"""ipinfo.io client for remote ASN lookups.

The ``/<ip>/org`` endpoint answers with a single plain-text line:

    AS15169 Google LLC

The service reports errors as prose in the body rather than through status
codes, so an answer whose first token is not an ASN identifier is treated as
a failure.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from ..errors import SourceLookupError
from ..models import is_asn
from ..settings import DEFAULT_IPINFO_URL

logger = logging.getLogger(__name__)

SOURCE_NAME = "ipinfo"


class IpInfoClient:
    """Remote ASN lookups against ipinfo.io.

    Usage:
        client = IpInfoClient(timeout=5.0)
        asn, org = client.lookup("8.8.8.8")
    """

    def __init__(
        self,
        timeout: Optional[float] = 5.0,
        url_template: str = DEFAULT_IPINFO_URL,
    ) -> None:
        """Initialize the client.

        Args:
            timeout: Seconds allowed for the request; None waits indefinitely
            url_template: Lookup URL with an ``{ip}`` placeholder
        """
        self.timeout = timeout
        self.url_template = url_template

        self.stats: dict[str, int] = {
            'lookups': 0,
            'api_success': 0,
            'api_failures': 0,
        }

    def lookup(self, ip_address: str) -> tuple[str, str]:
        """Query ipinfo.io for the ASN of an IP address.

        Args:
            ip_address: Validated, globally routable IPv4 address

        Returns:
            Tuple of (ASN identifier, organization); organization may be empty

        Raises:
            SourceLookupError: On transport failure, empty answer or an error message
        """
        self.stats['lookups'] += 1
        url = self.url_template.format(ip=ip_address)

        try:
            # ipinfo reports errors in the body, so the status code is not checked
            body = requests.get(url, timeout=self.timeout).text
        except requests.exceptions.RequestException as e:
            self.stats['api_failures'] += 1
            raise SourceLookupError(SOURCE_NAME, f"failed to GET '{url}': {e}") from e

        try:
            asn, org = self.parse_answer(body)
        except SourceLookupError:
            self.stats['api_failures'] += 1
            raise

        self.stats['api_success'] += 1
        logger.debug(f"ipinfo answer for {ip_address}: {asn} {org}")
        return asn, org

    @staticmethod
    def parse_answer(body: str) -> tuple[str, str]:
        """Split an ``"<ASN> <organization>"`` answer.

        Raises:
            SourceLookupError: If the answer is empty or does not start with an ASN
        """
        data = body.strip()
        if not data:
            raise SourceLookupError(SOURCE_NAME, "empty answer")
        parts = data.split(" ", 1)
        if not is_asn(parts[0]):
            raise SourceLookupError(SOURCE_NAME, f"lookup failed: {data}")
        if len(parts) < 2:
            return parts[0], ""
        return parts[0], parts[1].strip()

    def get_stats(self) -> dict[str, int]:
        """Get client statistics."""
        return dict(self.stats)

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0


__all__ = ['IpInfoClient']
