"""Command line entry point for the boomtrade gateway client."""
import argparse
import asyncio
import getpass
import json
import logging
import sys
from typing import Any

from boomtrade.core.config import Config, ConfigError, load_config
from boomtrade.core.errors import GatewayError
from boomtrade.core.order_builder import build_option_order, build_stock_order
from boomtrade.gateway import codec
from boomtrade.gateway import profiles
from boomtrade.gateway.session import GatewaySession
from boomtrade.models import Credentials, OrderType, TimeInForce

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="python -m boomtrade",
        description="boomtrade - equity and options trading through a brokerage gateway",
    )

    parser.add_argument(
        "-c", "--config",
        default="config/default.yaml",
        help="Path to configuration file (default: config/default.yaml)",
    )

    parser.add_argument(
        "-l", "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "-u", "--username",
        help="Gateway username (cloud variant; password is prompted)",
    )

    parser.add_argument(
        "--account",
        help="Account identifier to authenticate against (cloud variant)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("account", help="Show account summary")
    commands.add_parser("positions", help="List positions with portfolio totals")
    commands.add_parser("orders", help="List open orders (local variant)")

    quote = commands.add_parser("quote", help="Show a market quote")
    quote.add_argument("symbol")

    expiries = commands.add_parser("expiries", help="List option expiries for an underlying")
    expiries.add_argument("symbol")

    chain = commands.add_parser("chain", help="Show an option chain")
    chain.add_argument("symbol")
    chain.add_argument("expiry", help="Expiry as YYYYMMDD")

    order = commands.add_parser("order", help="Place a stock order")
    order.add_argument("side", choices=["BUY", "SELL", "buy", "sell"])
    order.add_argument("symbol")
    order.add_argument("quantity")
    order.add_argument(
        "-t", "--type",
        dest="order_type",
        default=OrderType.MARKET.value,
        choices=[t.value for t in OrderType],
        help="Order type code (default: MKT)",
    )
    order.add_argument("--limit", dest="limit_price", help="Limit price")
    order.add_argument("--stop", dest="stop_price", help="Stop or trail price")
    order.add_argument(
        "--tif",
        dest="time_in_force",
        default=TimeInForce.DAY.value,
        choices=[t.value for t in TimeInForce],
        help="Time in force (default: DAY)",
    )

    option = commands.add_parser("option-order", help="Place a single-leg option order")
    option.add_argument("side", choices=["BUY", "SELL", "buy", "sell"])
    option.add_argument("symbol", help="Underlying ticker")
    option.add_argument("expiry", help="Expiry as YYYYMMDD")
    option.add_argument("strike")
    option.add_argument("right", choices=["C", "P", "c", "p"], help="C for call, P for put")
    option.add_argument("quantity")
    option.add_argument(
        "-t", "--type",
        dest="order_type",
        default=OrderType.LIMIT.value,
        choices=[t.value for t in OrderType if not t.requires_stop_price],
        help="Order type code (default: LMT)",
    )
    option.add_argument("--limit", dest="limit_price", help="Limit price")

    return parser.parse_args(args)


def setup_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, level),
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Reduce noise from external libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


async def start_session(session: GatewaySession, config: Config, args: argparse.Namespace) -> None:
    """Connect or authenticate depending on the configured variant."""
    if session.profile.start_mode == profiles.CONNECT:
        await session.connect(config.connection_config())
        return

    if not args.username:
        raise ConfigError("The cloud gateway needs --username")
    credentials = Credentials(
        username=args.username,
        password=getpass.getpass(f"Password for {args.username}: "),
        account=args.account,
    )
    await session.authenticate(credentials)


async def run_command(session: GatewaySession, args: argparse.Namespace) -> Any:
    """Run one command against a ready session and return a JSON-ready result."""
    if args.command == "account":
        return codec.to_wire(await session.get_account())
    if args.command == "positions":
        return codec.to_wire(await session.get_portfolio())
    if args.command == "orders":
        return codec.to_wire(await session.list_open_orders())
    if args.command == "quote":
        return codec.to_wire(await session.get_market_quote(args.symbol))
    if args.command == "expiries":
        return await session.get_option_expiries(args.symbol)
    if args.command == "chain":
        return codec.to_wire(await session.get_option_chain(args.symbol, args.expiry))
    if args.command == "order":
        order = build_stock_order(
            symbol=args.symbol,
            quantity=args.quantity,
            order_type=args.order_type,
            side=args.side,
            limit_price=args.limit_price,
            stop_price=args.stop_price,
            time_in_force=args.time_in_force,
        )
        return codec.to_wire(await session.place_stock_order(order))
    if args.command == "option-order":
        order = build_option_order(
            symbol=args.symbol,
            expiry=args.expiry,
            strike=args.strike,
            is_call=args.right.upper() == "C",
            quantity=args.quantity,
            side=args.side,
            order_type=args.order_type,
            limit_price=args.limit_price,
        )
        return codec.to_wire(await session.place_option_order(order))
    raise ValueError(f"Unknown command: {args.command}")


async def run(config: Config, args: argparse.Namespace) -> Any:
    """Open a session, run the command and tear the session down."""
    async with GatewaySession.from_config(config) as session:
        await start_session(session, config, args)
        return await run_command(session, args)


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parsed_args = parse_args(args)

    setup_logging(parsed_args.log_level)

    logger.debug(f"Config: {parsed_args.config}")

    try:
        config = load_config(parsed_args.config)
        result = asyncio.run(run(config, parsed_args))

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    except GatewayError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
