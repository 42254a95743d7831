"""Database layer backing the override store."""

from .base import Base
from .engine import create_engine_from_settings, create_session_maker, init_schema
from .models import AsnOverride

__all__ = [
    "Base",
    "AsnOverride",
    "create_engine_from_settings",
    "create_session_maker",
    "init_schema",
]
