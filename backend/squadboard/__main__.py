"""Squadboard CLI entry point."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from squadboard import __version__
from squadboard.config import get_settings
from squadboard.exceptions import SquadboardError
from squadboard.observability import configure_logging

logger = logging.getLogger(__name__)


async def _with_services(settings, run):
    """Open storage and market data, run a coroutine against the services, clean up."""
    from squadboard.api.app import build_services, polymarket_config
    from squadboard.services.polymarket import PolymarketClient
    from squadboard.storage import dispose_engine, init_engine

    init_engine(settings.database_url)
    try:
        async with PolymarketClient(polymarket_config(settings)) as market_data:
            services = build_services(settings, market_data)
            return await run(services)
    finally:
        await dispose_engine()


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server."""
    import uvicorn

    from squadboard.api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create database tables."""
    from squadboard.storage import create_all, dispose_engine, init_engine

    settings = get_settings()

    async def run() -> None:
        init_engine(settings.database_url)
        try:
            await create_all()
        finally:
            await dispose_engine()

    try:
        asyncio.run(run())
        print("✓ Database tables created")
        return 0
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Print merged configuration with secrets masked."""
    settings = get_settings()
    data = settings.model_dump(mode="json")
    for secret in ("polymarket_api_key", "logfire_token"):
        if data.get(secret):
            data[secret] = "***"
    print(json.dumps(data, indent=2))
    return 0


def cmd_leaderboard(args: argparse.Namespace) -> int:
    """Print a squad leaderboard."""
    settings = get_settings()

    async def run(services):
        return await services.builder.get_leaderboard(
            args.squad_id, args.caller, args.timeframe
        )

    try:
        leaderboard = asyncio.run(_with_services(settings, run))
    except SquadboardError as e:
        logger.error(f"Leaderboard failed: {e.message}")
        return 1

    if not leaderboard.entries:
        print("No members in squad")
        return 0

    print(f"\n{leaderboard.timeframe.upper()} leaderboard for squad {leaderboard.squad_id}")
    for rank, entry in enumerate(leaderboard.entries, 1):
        print(f"{rank:>3}. {entry.username:<24} {entry.total_live_pnl:>12.2f}")
    return 0


def cmd_winner(args: argparse.Namespace) -> int:
    """Calculate and announce this week's MVP."""
    settings = get_settings()

    async def run(services):
        return await services.winners.calculate_winner(args.squad_id, args.caller)

    try:
        winner = asyncio.run(_with_services(settings, run))
    except SquadboardError as e:
        logger.error(f"Winner calculation failed: {e.message}")
        return 1

    print(f"Week {winner.week} MVP: {winner.username} ({winner.pnl:+.2f})")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="squadboard",
        description="Squadboard: squad leaderboards for prediction-market traders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Squadboard {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_serve = subparsers.add_parser("serve", help="Run the API server")
    parser_serve.add_argument("--host", default=None)
    parser_serve.add_argument("--port", type=int, default=None)
    parser_serve.set_defaults(func=cmd_serve)

    parser_init_db = subparsers.add_parser("init-db", help="Create database tables")
    parser_init_db.set_defaults(func=cmd_init_db)

    parser_config = subparsers.add_parser("config", help="Display merged configuration")
    parser_config.set_defaults(func=cmd_config)

    parser_leaderboard = subparsers.add_parser(
        "leaderboard",
        help="Print a squad's PnL leaderboard",
    )
    parser_leaderboard.add_argument("squad_id", type=int)
    parser_leaderboard.add_argument(
        "--as",
        dest="caller",
        required=True,
        help="Wallet address of a squad member",
    )
    parser_leaderboard.add_argument(
        "--timeframe",
        choices=["all", "weekly", "daily"],
        default="all",
    )
    parser_leaderboard.set_defaults(func=cmd_leaderboard)

    parser_winner = subparsers.add_parser(
        "winner",
        help="Calculate, save and announce this week's MVP",
    )
    parser_winner.add_argument("squad_id", type=int)
    parser_winner.add_argument(
        "--as",
        dest="caller",
        required=True,
        help="Wallet address of a squad member",
    )
    parser_winner.set_defaults(func=cmd_winner)

    args = parser.parse_args()

    settings = get_settings()
    configure_logging("DEBUG" if args.debug else settings.log_level)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
