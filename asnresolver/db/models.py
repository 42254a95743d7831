"""ORM models for the override store."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func

from .base import Base


class AsnOverride(Base):
    """Locally managed description for an ASN.

    A description stored here takes precedence over whatever the data sources
    report for the ASN. There is at most one row per ASN.
    """

    __tablename__ = "asn_overrides"

    asn = Column(String(32), primary_key=True, doc="ASN identifier, e.g. AS15169")
    name = Column(Text, nullable=False, doc="Description replacing the sourced one")
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"AsnOverride(asn={self.asn!r}, name={self.name!r})"


__all__ = ["AsnOverride"]
