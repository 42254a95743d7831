"""MaxMind GeoLite2-ASN offline database client."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import geoip2.database
import geoip2.errors

from ..models import format_asn

logger = logging.getLogger(__name__)


class MaxMindClient:
    """Local ASN lookups against a GeoLite2-ASN database.

    This is the first source consulted by the resolver. It never raises: a
    missing database, an unknown address or a reader failure all answer
    ``("", "")``.

    Usage:
        client = MaxMindClient(db_path=Path("/var/lib/asnresolver/maxmind"))
        asn, org = client.lookup("8.8.8.8")
        if asn:
            print(f"{asn} ({org})")
    """

    ASN_DB_FILENAME = "GeoLite2-ASN.mmdb"

    def __init__(self, db_path: Path) -> None:
        """Initialize MaxMind client with the database directory.

        Args:
            db_path: Directory containing ``GeoLite2-ASN.mmdb``

        Raises:
            ValueError: If db_path exists and is not a directory
        """
        if db_path.exists() and not db_path.is_dir():
            raise ValueError(f"Database path must be a directory: {db_path}")

        self.db_path = db_path
        self.asn_db_path = db_path / self.ASN_DB_FILENAME

        self._asn_reader: Optional[geoip2.database.Reader] = None
        self._reader_lock = threading.Lock()

        self.stats: Dict[str, int] = {
            'lookups': 0,
            'asn_hits': 0,
            'not_found': 0,
            'errors': 0,
        }

        logger.info(f"MaxMind client initialized with database path: {db_path}")

    def _get_asn_reader(self) -> Optional[geoip2.database.Reader]:
        """Get or create the ASN database reader.

        Returns:
            ASN database reader or None if database unavailable
        """
        with self._reader_lock:
            if self._asn_reader is None:
                if not self.asn_db_path.exists():
                    logger.warning(f"ASN database not found: {self.asn_db_path}")
                    return None

                try:
                    self._asn_reader = geoip2.database.Reader(str(self.asn_db_path))
                    logger.debug("ASN database reader opened successfully")
                except Exception as e:
                    logger.error(f"Failed to open ASN database: {e}")
                    return None

            return self._asn_reader

    def lookup(self, ip_address: str) -> tuple[str, str]:
        """Look up the ASN and organization of an IP address.

        Args:
            ip_address: IP address to look up

        Returns:
            Tuple of (ASN identifier, organization); empty strings when unknown

        Examples:
            >>> client = MaxMindClient(Path("/var/lib/asnresolver/maxmind"))
            >>> client.lookup("8.8.8.8")
            ('AS15169', 'GOOGLE')
        """
        self.stats['lookups'] += 1

        reader = self._get_asn_reader()
        if reader is None:
            self.stats['errors'] += 1
            return "", ""

        try:
            response = reader.asn(ip_address)
        except geoip2.errors.AddressNotFoundError:
            logger.debug(f"IP {ip_address} not found in ASN database")
            self.stats['not_found'] += 1
            return "", ""
        except Exception as e:
            logger.error(f"ASN lookup failed for {ip_address}: {e}")
            self.stats['errors'] += 1
            return "", ""

        if not response.autonomous_system_number:
            self.stats['not_found'] += 1
            return "", ""

        self.stats['asn_hits'] += 1
        org = (response.autonomous_system_organization or "").strip()
        return format_asn(response.autonomous_system_number), org

    def get_database_age(self) -> timedelta:
        """Get age of the ASN database file.

        Raises:
            FileNotFoundError: If the database file does not exist
        """
        if not self.asn_db_path.exists():
            raise FileNotFoundError(f"No MaxMind database found at {self.asn_db_path}")
        mtime = datetime.fromtimestamp(self.asn_db_path.stat().st_mtime, tz=timezone.utc)
        return datetime.now(timezone.utc) - mtime

    def close(self) -> None:
        """Close the database reader and release resources."""
        with self._reader_lock:
            if self._asn_reader:
                self._asn_reader.close()
                self._asn_reader = None
        logger.debug("MaxMind client closed")

    def get_stats(self) -> Dict[str, int]:
        """Get client statistics."""
        return dict(self.stats)

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0

    def __enter__(self) -> MaxMindClient:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - close reader."""
        self.close()


__all__ = ['MaxMindClient']
