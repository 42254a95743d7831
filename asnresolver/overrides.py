"""Override store adapter over the ``asn_overrides`` table.

Overrides let an operator pin the description of an ASN regardless of what
the data sources answer. The adapter holds no locks; concurrency control is
left to the database.

A store built without a session factory is valid and means "overrides
disabled": every operation raises ``OverridesDisabledError``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .db.models import AsnOverride
from .errors import MalformedAsnError, OverrideNotFoundError, OverridesDisabledError, OverrideStoreError
from .models import OverrideRecord, is_asn

logger = logging.getLogger(__name__)


class OverrideStore:
    """CRUD access to ASN description overrides.

    Example:
        >>> from asnresolver.db import create_session_maker, init_schema
        >>> init_schema(engine)
        >>> store = OverrideStore(create_session_maker(engine))
        >>> store.set("AS15169", "Custom Name")
        >>> store.lookup("AS15169")
        'Custom Name'
    """

    def __init__(self, session_factory: Optional[sessionmaker[Session]] = None) -> None:
        """Initialize the adapter.

        Args:
            session_factory: Factory for sessions bound to the override database,
                or None to disable overrides
        """
        self._session_factory = session_factory

    @property
    def enabled(self) -> bool:
        """True if a backing database is configured."""
        return self._session_factory is not None

    def _session(self) -> Session:
        if self._session_factory is None:
            raise OverridesDisabledError()
        return self._session_factory()

    def lookup(self, asn: str) -> str:
        """Return the override description for ``asn``.

        Raises:
            OverridesDisabledError: If no store is configured
            OverrideNotFoundError: If no override exists for ``asn``
            OverrideStoreError: If the database query fails
        """
        with self._session() as session:
            try:
                name = session.execute(select(AsnOverride.name).where(AsnOverride.asn == asn)).scalar_one_or_none()
            except SQLAlchemyError as e:
                raise OverrideStoreError(f"cannot lookup override: {e}") from e
        if name is None:
            raise OverrideNotFoundError(asn)
        return str(name)

    def set(self, asn: str, description: str) -> None:
        """Store or update the override for ``asn``.

        Raises:
            OverridesDisabledError: If no store is configured
            MalformedAsnError: If ``asn`` is not of the form ``AS<digits>``
            OverrideStoreError: If the upsert fails
        """
        if not self.enabled:
            raise OverridesDisabledError()
        if not is_asn(asn):
            raise MalformedAsnError(asn)

        now = datetime.now(timezone.utc)
        with self._session() as session:
            try:
                if session.get_bind().dialect.name == "postgresql":
                    stmt = pg_insert(AsnOverride).values(asn=asn, name=description, updated_at=now)
                    stmt = stmt.on_conflict_do_update(
                        index_elements=[AsnOverride.asn],
                        set_={"name": description, "updated_at": now},
                    )
                    session.execute(stmt)
                else:
                    existing = session.get(AsnOverride, asn)
                    if existing is not None:
                        existing.name = description
                        existing.updated_at = now
                    else:
                        session.add(AsnOverride(asn=asn, name=description, updated_at=now))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise OverrideStoreError(f"cannot set override: {e}") from e
        logger.info(f"Override set for {asn}: {description!r}")

    def remove(self, asn: str) -> None:
        """Make sure no override exists for ``asn``.

        Removing a missing override is not an error.

        Raises:
            OverridesDisabledError: If no store is configured
            OverrideStoreError: If the delete fails
        """
        with self._session() as session:
            try:
                result = session.execute(delete(AsnOverride).where(AsnOverride.asn == asn))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise OverrideStoreError(f"cannot remove override: {e}") from e
        if result.rowcount:
            logger.info(f"Override removed for {asn}")

    def list_all(self) -> list[OverrideRecord]:
        """Return every override, ordered by ASN.

        Raises:
            OverridesDisabledError: If no store is configured
            OverrideStoreError: If the query fails
        """
        with self._session() as session:
            try:
                rows = session.execute(select(AsnOverride.asn, AsnOverride.name).order_by(AsnOverride.asn)).all()
            except SQLAlchemyError as e:
                raise OverrideStoreError(f"cannot retrieve overrides: {e}") from e
        return [OverrideRecord(asn=asn, name=name) for asn, name in rows]


__all__ = ["OverrideStore"]
