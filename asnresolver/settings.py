"""Runtime configuration for the ASN resolver."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .utils.config import load_toml_section

DEFAULT_ENV_PREFIX = "ASNRESOLVER_"
DEFAULT_IPINFO_URL = "http://ipinfo.io/{ip}/org"
DEFAULT_MAXMIND_DIR = Path.home() / ".cache" / "asnresolver" / "maxmind"


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _coerce_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _coerce_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value.strip())
    except ValueError:
        return default


@dataclass(slots=True)
class DatabaseSettings:
    """Connection settings for the override store database."""

    url: str
    echo: bool = False
    pool_size: int | None = None
    pool_timeout: int = 30

    @classmethod
    def from_url(cls, url: str, env_prefix: str = DEFAULT_ENV_PREFIX) -> "DatabaseSettings":
        """Build settings for ``url`` with engine tuning taken from the environment."""
        env = os.environ
        prefix = env_prefix.upper()
        pool_size = _coerce_int(env.get(f"{prefix}DB_POOL_SIZE"), -1)
        return cls(
            url=url,
            echo=_coerce_bool(env.get(f"{prefix}DB_ECHO"), False),
            pool_size=pool_size if pool_size > 0 else None,
            pool_timeout=_coerce_int(env.get(f"{prefix}DB_POOL_TIMEOUT"), 30),
        )


@dataclass(slots=True)
class ResolverSettings:
    """Settings shared by the resolver and its source clients.

    Attributes:
        timeout: Seconds allowed for each remote HTTP and DNS call; 0 blocks indefinitely
        cache_ttl_seconds: Lifetime of a cached resolution
        maxmind_db_dir: Directory holding ``GeoLite2-ASN.mmdb``
        overrides_db_url: SQLAlchemy URL of the override store; None disables overrides
        ipinfo_url: Remote lookup URL template with an ``{ip}`` placeholder
        dns_server: Resolver queried for ASN descriptions
        dns_port: Port of ``dns_server``
    """

    timeout: float = 5.0
    cache_ttl_seconds: int = 24 * 3600
    maxmind_db_dir: Path = DEFAULT_MAXMIND_DIR
    overrides_db_url: str | None = None
    ipinfo_url: str = DEFAULT_IPINFO_URL
    dns_server: str = "8.8.8.8"
    dns_port: int = 53

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout must not be negative, got {self.timeout}")
        if self.cache_ttl_seconds <= 0:
            raise ValueError(f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}")
        if "{ip}" not in self.ipinfo_url:
            raise ValueError(f"ipinfo_url must contain an '{{ip}}' placeholder: {self.ipinfo_url}")
        self.maxmind_db_dir = Path(self.maxmind_db_dir).expanduser()

    @property
    def request_timeout(self) -> float | None:
        """Timeout handed to network clients, None meaning no timeout."""
        return self.timeout if self.timeout > 0 else None

    @classmethod
    def from_sources(
        cls,
        config: Mapping[str, Any] | None = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        config_file: Path | None = None,
    ) -> "ResolverSettings":
        """Build settings from defaults, the TOML file, environment variables and a mapping.

        Precedence order (highest to lowest):
        1. Explicit config mapping values
        2. Environment variables
        3. ``[resolver]`` table of the TOML config file
        4. Default values
        """
        cfg: dict[str, Any] = {
            "timeout": 5.0,
            "cache_ttl_seconds": 24 * 3600,
            "maxmind_db_dir": DEFAULT_MAXMIND_DIR,
            "overrides_db_url": None,
            "ipinfo_url": DEFAULT_IPINFO_URL,
            "dns_server": "8.8.8.8",
            "dns_port": 53,
        }

        file_config = load_toml_section("resolver", config_file)
        cfg.update({k: v for k, v in file_config.items() if k in cfg})

        env = os.environ
        prefix = env_prefix.upper()

        cfg["timeout"] = _coerce_float(env.get(f"{prefix}TIMEOUT"), float(cfg["timeout"]))
        cfg["cache_ttl_seconds"] = _coerce_int(env.get(f"{prefix}CACHE_TTL_SECONDS"), int(cfg["cache_ttl_seconds"]))
        cfg["dns_port"] = _coerce_int(env.get(f"{prefix}DNS_PORT"), int(cfg["dns_port"]))

        maxmind_dir = env.get(f"{prefix}MAXMIND_DB_DIR")
        if maxmind_dir:
            cfg["maxmind_db_dir"] = Path(maxmind_dir)
        overrides_url = env.get(f"{prefix}OVERRIDES_DB_URL")
        if overrides_url:
            cfg["overrides_db_url"] = overrides_url
        ipinfo_url = env.get(f"{prefix}IPINFO_URL")
        if ipinfo_url:
            cfg["ipinfo_url"] = ipinfo_url
        dns_server = env.get(f"{prefix}DNS_SERVER")
        if dns_server:
            cfg["dns_server"] = dns_server.strip()

        if config:
            cfg.update({k: v for k, v in config.items() if v is not None and k in cfg})

        return cls(**cfg)


def load_resolver_settings(
    config: Mapping[str, Any] | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> ResolverSettings:
    """Convenience wrapper used by CLI entry points."""
    return ResolverSettings.from_sources(config=config, env_prefix=env_prefix)


__all__ = ["DatabaseSettings", "ResolverSettings", "load_resolver_settings"]
