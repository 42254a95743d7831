"""Command line interface for ASN lookups and override management."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from ..errors import AsnResolverError
from ..factory import create_resolver
from ..resolver import AsnResolver
from ..settings import load_resolver_settings

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asnresolver",
        description="Resolve the ASN and organization of IPv4 addresses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resolve addresses
  asnresolver lookup 8.8.8.8 1.1.1.1

  # Machine readable output
  asnresolver lookup --json 8.8.8.8

  # Manage description overrides
  asnresolver --overrides-db sqlite:///overrides.sqlite overrides set AS15169 "Google"
  asnresolver --overrides-db sqlite:///overrides.sqlite overrides list
        """,
    )
    parser.add_argument("--timeout", type=float, help="Seconds allowed per remote call (0 disables the timeout)")
    parser.add_argument("--maxmind-dir", type=Path, help="Directory containing GeoLite2-ASN.mmdb")
    parser.add_argument("--overrides-db", help="SQLAlchemy URL of the override database")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="Resolve one or more IP addresses")
    lookup.add_argument("ips", nargs="+", metavar="IP", help="IPv4 address to resolve")
    lookup.add_argument("--json", action="store_true", help="Print one JSON object per address")

    overrides = subparsers.add_parser("overrides", help="Manage ASN description overrides")
    actions = overrides.add_subparsers(dest="action", required=True)
    actions.add_parser("list", help="List every override")
    set_parser = actions.add_parser("set", help="Create or replace an override")
    set_parser.add_argument("asn", help="ASN identifier, e.g. AS15169")
    set_parser.add_argument("name", help="Description to report for the ASN")
    remove_parser = actions.add_parser("remove", help="Remove an override")
    remove_parser.add_argument("asn", help="ASN identifier, e.g. AS15169")

    return parser


def _run_lookup(resolver: AsnResolver, ips: list[str], as_json: bool) -> int:
    failures = 0
    for ip in ips:
        try:
            result = resolver.resolve(ip)
        except AsnResolverError as e:
            failures += 1
            if as_json:
                print(json.dumps({"ip": ip, "error": str(e)}))
            else:
                print(f"{ip}\terror: {e}", file=sys.stderr)
            continue

        if as_json:
            payload = {
                "ip": ip,
                "asn": result.asn,
                "description": result.description,
                "source": result.source,
            }
            print(json.dumps(payload, ensure_ascii=False))
        else:
            print(f"{ip}\t{result.asn}\t{result.description}")
    return 1 if failures else 0


def _run_overrides(resolver: AsnResolver, args: argparse.Namespace) -> int:
    if args.action == "list":
        for record in resolver.override_list():
            print(f"{record.asn}\t{record.name}")
    elif args.action == "set":
        resolver.override_set(args.asn, args.name)
        print(f"Override set for {args.asn}")
    else:
        resolver.override_remove(args.asn)
        print(f"Override removed for {args.asn}")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    """Run the asnresolver CLI and return an exit status."""
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)

    try:
        settings = load_resolver_settings(
            {
                "timeout": args.timeout,
                "maxmind_db_dir": args.maxmind_dir,
                "overrides_db_url": args.overrides_db,
            }
        )
        resolver = create_resolver(settings)
    except (ValueError, AsnResolverError, SQLAlchemyError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "lookup":
            return _run_lookup(resolver, args.ips, args.json)
        return _run_overrides(resolver, args)
    except AsnResolverError as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        close = getattr(resolver.local, "close", None)
        if callable(close):
            close()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
