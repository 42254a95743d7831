"""Unit tests for the SQLAlchemy backed override store."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from asnresolver.db import AsnOverride
from asnresolver.errors import (
    MalformedAsnError,
    OverrideNotFoundError,
    OverridesDisabledError,
    OverrideStoreError,
)
from asnresolver.models import OverrideRecord
from asnresolver.overrides import OverrideStore


class TestOverrideStore:
    """CRUD operations against an in-memory SQLite database."""

    def test_set_then_lookup(self, override_store: OverrideStore) -> None:
        override_store.set("AS15169", "Custom Name")
        assert override_store.lookup("AS15169") == "Custom Name"

    def test_set_is_an_upsert(self, override_store: OverrideStore, session_factory) -> None:
        """A second set replaces the description, keeping one row."""
        override_store.set("AS15169", "First")
        override_store.set("AS15169", "Second")

        assert override_store.lookup("AS15169") == "Second"
        with session_factory() as session:
            assert session.query(AsnOverride).count() == 1

    def test_lookup_missing(self, override_store: OverrideStore) -> None:
        with pytest.raises(OverrideNotFoundError) as exc_info:
            override_store.lookup("AS64496")
        assert exc_info.value.asn == "AS64496"
        assert isinstance(exc_info.value, LookupError)

    @pytest.mark.parametrize("asn", ["15169", "as15169", "AS", "AS15169 ", "ASN15169", ""])
    def test_set_rejects_malformed_asn(self, override_store: OverrideStore, asn: str) -> None:
        with pytest.raises(MalformedAsnError):
            override_store.set(asn, "Name")
        assert override_store.list_all() == []

    def test_remove(self, override_store: OverrideStore) -> None:
        override_store.set("AS15169", "Custom Name")
        override_store.remove("AS15169")
        with pytest.raises(OverrideNotFoundError):
            override_store.lookup("AS15169")

    def test_remove_missing_is_not_an_error(self, override_store: OverrideStore) -> None:
        override_store.remove("AS64496")
        override_store.remove("AS64496")

    def test_list_empty(self, override_store: OverrideStore) -> None:
        assert override_store.list_all() == []

    def test_list_sorted(self, override_store: OverrideStore) -> None:
        override_store.set("AS15169", "Google")
        override_store.set("AS13335", "Cloudflare")
        assert override_store.list_all() == [
            OverrideRecord(asn="AS13335", name="Cloudflare"),
            OverrideRecord(asn="AS15169", name="Google"),
        ]

    def test_enabled(self, override_store: OverrideStore) -> None:
        assert override_store.enabled is True
        assert OverrideStore().enabled is False


class TestDisabledStore:
    """A store without a database answers OverridesDisabledError everywhere."""

    def test_every_operation_disabled(self) -> None:
        store = OverrideStore()
        with pytest.raises(OverridesDisabledError):
            store.lookup("AS15169")
        with pytest.raises(OverridesDisabledError):
            store.set("AS15169", "Name")
        with pytest.raises(OverridesDisabledError):
            store.remove("AS15169")
        with pytest.raises(OverridesDisabledError):
            store.list_all()

    def test_disabled_checked_before_asn_format(self) -> None:
        with pytest.raises(OverridesDisabledError):
            OverrideStore().set("bogus", "Name")


class TestDatabaseFailures:
    """SQLAlchemy errors surface as OverrideStoreError."""

    @staticmethod
    def _failing_store() -> tuple[OverrideStore, MagicMock]:
        session = MagicMock()
        session.__enter__.return_value = session
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        session.get_bind.return_value.dialect.name = "sqlite"
        session.get.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        factory = MagicMock(return_value=session)
        return OverrideStore(factory), session

    def test_lookup_failure(self) -> None:
        store, _ = self._failing_store()
        with pytest.raises(OverrideStoreError, match="database is locked"):
            store.lookup("AS15169")

    def test_set_failure_rolls_back(self) -> None:
        store, session = self._failing_store()
        with pytest.raises(OverrideStoreError):
            store.set("AS15169", "Name")
        session.rollback.assert_called_once()

    def test_remove_failure_rolls_back(self) -> None:
        store, session = self._failing_store()
        with pytest.raises(OverrideStoreError):
            store.remove("AS15169")
        session.rollback.assert_called_once()

    def test_list_failure(self) -> None:
        store, _ = self._failing_store()
        with pytest.raises(OverrideStoreError):
            store.list_all()
