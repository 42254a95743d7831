"""Shared pytest fixtures for asnresolver tests."""

from __future__ import annotations

from datetime import timedelta
from typing import Generator
from unittest.mock import Mock

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from asnresolver.cache import ResultCache
from asnresolver.db import create_engine_from_settings, create_session_maker, init_schema
from asnresolver.overrides import OverrideStore
from asnresolver.settings import DatabaseSettings


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock for TTL tests."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResultCache:
    """Result cache with a one hour TTL driven by the fake clock."""
    return ResultCache(ttl=timedelta(hours=1), clock=clock)


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the override schema."""
    engine = create_engine_from_settings(DatabaseSettings(url="sqlite:///:memory:"))
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the in-memory engine."""
    return create_session_maker(db_engine)


@pytest.fixture
def override_store(session_factory: sessionmaker[Session]) -> OverrideStore:
    """Override store backed by SQLite."""
    return OverrideStore(session_factory)


@pytest.fixture
def mock_local() -> Mock:
    """Mock MaxMind client; finds nothing by default."""
    client = Mock()
    client.lookup = Mock(return_value=("", ""))
    return client


@pytest.fixture
def mock_remote() -> Mock:
    """Mock ipinfo.io client; finds nothing by default."""
    client = Mock()
    client.lookup = Mock(return_value=("", ""))
    return client


@pytest.fixture
def mock_descriptions() -> Mock:
    """Mock Team Cymru client; answers an empty description by default."""
    client = Mock()
    client.lookup = Mock(return_value="")
    return client
