"""Configuration file loading for asnresolver.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "asnresolver.toml"


def find_config_file() -> Path | None:
    """Locate the configuration file.

    Looks in ``config/`` first, then the current directory.
    """
    for candidate in (Path("config") / CONFIG_FILENAME, Path(CONFIG_FILENAME)):
        if candidate.exists():
            return candidate
    return None


def load_toml_section(section: str, path: Path | None = None) -> dict[str, Any]:
    """Return one table of the configuration file, or an empty dict.

    Args:
        section: Name of the top-level table, e.g. ``"resolver"``
        path: Explicit file to read; searched with ``find_config_file`` when None

    Returns:
        Table contents; empty if the file or table is missing or unreadable

    Example:
        >>> settings = load_toml_section("resolver")
        >>> timeout = settings.get("timeout", 5.0)
    """
    config_file = path if path is not None else find_config_file()
    if config_file is None:
        return {}

    try:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
    except OSError as e:
        logger.debug(f"Could not read {config_file}: {e}")
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Failed to parse {config_file}: {e}. Using defaults.")
        return {}

    table = data.get(section, {})
    if not isinstance(table, dict):
        logger.warning(f"[{section}] in {config_file} is not a table, ignoring it")
        return {}
    return dict(table)


__all__ = ["find_config_file", "load_toml_section"]
