"""Factory wiring an AsnResolver from settings."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from .cache import ResultCache
from .db import create_engine_from_settings, create_session_maker, init_schema
from .events import Observer
from .overrides import OverrideStore
from .resolver import AsnResolver
from .settings import DatabaseSettings, ResolverSettings, load_resolver_settings
from .sources import CymruClient, IpInfoClient, MaxMindClient

logger = logging.getLogger(__name__)


def create_override_store(database_url: Optional[str]) -> OverrideStore:
    """Build the override store for ``database_url``.

    The ``asn_overrides`` table is created if missing. A missing URL yields a
    store with overrides disabled.
    """
    if not database_url:
        logger.info("No override database configured, overrides disabled")
        return OverrideStore()

    engine = create_engine_from_settings(DatabaseSettings.from_url(database_url))
    init_schema(engine)
    logger.info(f"Override store ready on {engine.url.render_as_string(hide_password=True)}")
    return OverrideStore(create_session_maker(engine))


def create_resolver(
    settings: Optional[ResolverSettings] = None,
    observer: Optional[Observer] = None,
) -> AsnResolver:
    """Create an AsnResolver with its source clients, cache and override store.

    Args:
        settings: Resolver settings; loaded from file and environment when None
        observer: Optional callback receiving ResolutionEvent objects

    Returns:
        Resolver ready to answer lookups

    Examples:
        >>> resolver = create_resolver(ResolverSettings(timeout=2.0))
        >>> resolver.resolve("8.8.8.8").asn
        'AS15169'
    """
    if settings is None:
        settings = load_resolver_settings()

    timeout = settings.request_timeout
    maxmind = MaxMindClient(settings.maxmind_db_dir)
    ipinfo = IpInfoClient(timeout=timeout, url_template=settings.ipinfo_url)
    cymru = CymruClient(timeout=timeout, nameserver=settings.dns_server, port=settings.dns_port)

    cache = ResultCache(ttl=timedelta(seconds=settings.cache_ttl_seconds))
    overrides = create_override_store(settings.overrides_db_url)

    logger.debug(f"Resolver created (timeout={timeout}, cache_ttl={settings.cache_ttl_seconds}s)")
    return AsnResolver(
        local=maxmind,
        remote=ipinfo,
        descriptions=cymru,
        overrides=overrides,
        cache=cache,
        observer=observer,
    )


__all__ = ["create_resolver", "create_override_store"]
