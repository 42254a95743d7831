"""Unit tests for the MaxMind GeoLite2-ASN client."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import geoip2.errors
import pytest

from asnresolver.sources.maxmind_client import MaxMindClient


@pytest.fixture
def db_dir(tmp_path: Path) -> Path:
    """Directory holding a placeholder ASN database file."""
    (tmp_path / MaxMindClient.ASN_DB_FILENAME).write_bytes(b"placeholder")
    return tmp_path


def _asn_response(number: int | None, org: str | None) -> Mock:
    response = Mock()
    response.autonomous_system_number = number
    response.autonomous_system_organization = org
    return response


class TestMaxMindClient:
    """Test MaxMindClient lookups with a patched geoip2 reader."""

    def test_rejects_file_as_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "file.mmdb"
        path.write_bytes(b"")
        with pytest.raises(ValueError, match="must be a directory"):
            MaxMindClient(path)

    def test_lookup_hit(self, db_dir: Path) -> None:
        reader = MagicMock()
        reader.asn.return_value = _asn_response(15169, "GOOGLE ")
        with patch("geoip2.database.Reader", return_value=reader) as reader_cls:
            client = MaxMindClient(db_dir)
            assert client.lookup("8.8.8.8") == ("AS15169", "GOOGLE")
            assert client.lookup("8.8.4.4") == ("AS15169", "GOOGLE")

        reader_cls.assert_called_once_with(str(db_dir / MaxMindClient.ASN_DB_FILENAME))
        assert client.get_stats()["asn_hits"] == 2

    def test_lookup_without_organization(self, db_dir: Path) -> None:
        reader = MagicMock()
        reader.asn.return_value = _asn_response(64496, None)
        with patch("geoip2.database.Reader", return_value=reader):
            assert MaxMindClient(db_dir).lookup("5.5.5.5") == ("AS64496", "")

    def test_address_not_found(self, db_dir: Path) -> None:
        reader = MagicMock()
        reader.asn.side_effect = geoip2.errors.AddressNotFoundError("not found")
        with patch("geoip2.database.Reader", return_value=reader):
            client = MaxMindClient(db_dir)
            assert client.lookup("5.5.5.5") == ("", "")
        assert client.get_stats()["not_found"] == 1

    def test_reader_error_never_raises(self, db_dir: Path) -> None:
        reader = MagicMock()
        reader.asn.side_effect = RuntimeError("corrupt database")
        with patch("geoip2.database.Reader", return_value=reader):
            client = MaxMindClient(db_dir)
            assert client.lookup("5.5.5.5") == ("", "")
        assert client.get_stats()["errors"] == 1

    def test_missing_database(self, tmp_path: Path) -> None:
        with patch("geoip2.database.Reader") as reader_cls:
            client = MaxMindClient(tmp_path)
            assert client.lookup("8.8.8.8") == ("", "")
        reader_cls.assert_not_called()

    def test_unopenable_database(self, db_dir: Path) -> None:
        with patch("geoip2.database.Reader", side_effect=OSError("bad file")):
            assert MaxMindClient(db_dir).lookup("8.8.8.8") == ("", "")

    def test_close_releases_reader(self, db_dir: Path) -> None:
        reader = MagicMock()
        reader.asn.return_value = _asn_response(15169, "GOOGLE")
        with patch("geoip2.database.Reader", return_value=reader):
            with MaxMindClient(db_dir) as client:
                client.lookup("8.8.8.8")
        reader.close.assert_called_once()

    def test_database_age(self, db_dir: Path) -> None:
        age = MaxMindClient(db_dir).get_database_age()
        assert timedelta(0) <= age < timedelta(minutes=5)

    def test_database_age_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            MaxMindClient(tmp_path).get_database_age()

    def test_reset_stats(self, tmp_path: Path) -> None:
        client = MaxMindClient(tmp_path)
        client.lookup("8.8.8.8")
        client.reset_stats()
        assert set(client.get_stats().values()) == {0}
