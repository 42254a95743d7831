r"""Team Cymru DNS client for ASN descriptions.

Query Format:
    TXT AS15169.asn.cymru.com
    Response: "15169 | US | arin | 2000-03-30 | GOOGLE - Google Inc., US"

The description is the last pipe-delimited field. Queries go over UDP straight
to a fixed public resolver instead of the system resolver configuration, and a
timeout of None waits on the socket indefinitely.
"""

from __future__ import annotations

import logging
from typing import Optional

import dns.exception
import dns.message
import dns.query
import dns.rcode
import dns.rdataclass
import dns.rdatatype

from ..errors import SourceLookupError

logger = logging.getLogger(__name__)

SOURCE_NAME = "cymru"


class CymruClient:
    """Resolve ASN descriptions through Team Cymru's DNS service.

    Usage:
        client = CymruClient(timeout=5.0)
        description = client.lookup("AS15169")
    """

    # Team Cymru DNS suffix for ASN descriptions
    DNS_SUFFIX = "asn.cymru.com."

    def __init__(
        self,
        timeout: Optional[float] = 5.0,
        nameserver: str = "8.8.8.8",
        port: int = 53,
    ) -> None:
        """Initialize the client.

        Args:
            timeout: Seconds allowed for the query; None waits indefinitely
            nameserver: Resolver address the queries are sent to
            port: Resolver port
        """
        self.timeout = timeout
        self.nameserver = nameserver
        self.port = port

        self.stats: dict[str, int] = {
            'lookups': 0,
            'dns_success': 0,
            'dns_failures': 0,
        }

    def lookup(self, asn: str) -> str:
        """Retrieve the description of an ASN.

        Args:
            asn: ASN identifier, e.g. ``AS15169``

        Returns:
            Organization name

        Raises:
            SourceLookupError: On empty input, DNS failure, NXDOMAIN or a missing or empty TXT answer

        Examples:
            >>> CymruClient().lookup("AS15169")
            'GOOGLE - Google Inc., US'
        """
        if not asn:
            raise SourceLookupError(SOURCE_NAME, "empty asn parameter")

        self.stats['lookups'] += 1
        # make_query sets the RD flag
        query = dns.message.make_query(f"{asn}.{self.DNS_SUFFIX}", dns.rdatatype.TXT, dns.rdataclass.IN)

        try:
            response = dns.query.udp(query, self.nameserver, timeout=self.timeout, port=self.port)
        except dns.exception.Timeout as e:
            self.stats['dns_failures'] += 1
            raise SourceLookupError(SOURCE_NAME, f"DNS timeout for {asn}") from e
        except (dns.exception.DNSException, OSError) as e:
            self.stats['dns_failures'] += 1
            raise SourceLookupError(SOURCE_NAME, f"failed to query dns: {e}") from e

        if response.rcode() == dns.rcode.NXDOMAIN:
            logger.debug(f"DNS NXDOMAIN for {asn}")
            self.stats['dns_failures'] += 1
            raise SourceLookupError(SOURCE_NAME, f"no such ASN record: {asn}")

        for rrset in response.answer:
            if rrset.rdtype != dns.rdatatype.TXT:
                continue
            for rdata in rrset:
                txt_data = b''.join(rdata.strings).decode('utf-8', errors='replace')
                logger.debug(f"DNS TXT for {asn}: {txt_data}")
                description = self.parse_txt(txt_data)
                if not description:
                    self.stats['dns_failures'] += 1
                    raise SourceLookupError(SOURCE_NAME, f"empty TXT payload for {asn}")
                self.stats['dns_success'] += 1
                return description

        self.stats['dns_failures'] += 1
        raise SourceLookupError(SOURCE_NAME, f"no TXT answer for {asn}")

    @staticmethod
    def parse_txt(txt_record: str) -> str:
        """Drop every field but the last one and trim it.

        Example:
            >>> CymruClient.parse_txt("15169 | US | arin | 2000-03-30 | GOOGLE - Google Inc., US")
            'GOOGLE - Google Inc., US'
        """
        return txt_record.rpartition('|')[2].strip()

    def get_stats(self) -> dict[str, int]:
        """Get client statistics."""
        return dict(self.stats)

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0


__all__ = ['CymruClient']
