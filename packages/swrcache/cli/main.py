"""Command-line interface for inspecting and clearing the request cache."""

from __future__ import annotations

import argparse
import asyncio
from datetime import UTC, datetime
import json
import sys

from rich.console import Console

from swrcache.core.caching import IdentityUnavailable, StaticIdentityProvider, StoreError
from swrcache.core.caching.staleness import record_age
from swrcache.core.config.loader import load_app_config
from swrcache.core.session import CacheSession
from swrcache.core.utils.logging import configure_logging_from_config

console = Console()


async def show_async(session: CacheSession, key: str, bind_identity: bool) -> int:
    """Print the stored record for a key."""
    async with session:
        record = await session.client.peek(key, bind_identity=bind_identity)

    if record is None:
        console.print(f"[yellow]not cached:[/yellow] {key}")
        return 1

    written = datetime.fromtimestamp(record.timestamp / 1000, tz=UTC)
    age = record_age(record)
    console.print(f"[bold]Key:[/bold] {key}")
    console.print(f"[bold]Written:[/bold] {written.isoformat()} ({age.total_seconds():.0f}s ago)")
    console.print_json(json.dumps(record.content, ensure_ascii=False))
    return 0


async def remove_async(session: CacheSession, key: str, bind_identity: bool) -> int:
    """Delete the stored record for a key."""
    async with session:
        await session.client.remove_cache(key, bind_identity=bind_identity)
    console.print(f"[green]removed:[/green] {key}")
    return 0


async def purge_async(session: CacheSession) -> int:
    """Delete every stored record."""
    async with session:
        removed = await session.store.purge()
    console.print(f"[green]purged {removed} record(s)[/green]")
    return 0


def run(args: argparse.Namespace) -> int:
    """Dispatch a parsed command."""
    try:
        app_config = load_app_config(args.config)
    except FileNotFoundError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1
    configure_logging_from_config(app_config.logging)

    identity = StaticIdentityProvider(getattr(args, "identity", None))
    session = CacheSession(app_config=app_config, identity=identity)
    bind_identity = getattr(args, "identity", None) is not None

    try:
        if args.cmd == "show":
            return asyncio.run(show_async(session, args.key, bind_identity))
        if args.cmd == "remove":
            return asyncio.run(remove_async(session, args.key, bind_identity))
        return asyncio.run(purge_async(session))
    except (IdentityUnavailable, StoreError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="swrcache",
        description="swrcache - inspect and clear the stale-while-revalidate request cache",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to app config (.yaml/.json, default: swrcache.yaml if present)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    show = sub.add_parser("show", help="Print the cached record for a key")
    show.add_argument("key", help="Logical cache key")
    show.add_argument("--identity", default=None, help="Identity token the key is bound to")

    remove = sub.add_parser("remove", help="Remove the cached record for a key")
    remove.add_argument("key", help="Logical cache key")
    remove.add_argument("--identity", default=None, help="Identity token the key is bound to")

    sub.add_parser("purge", help="Remove every cached record")

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
