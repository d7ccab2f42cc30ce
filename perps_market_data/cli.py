"""``perps-markets`` command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from rich.console import Console
from rich.live import Live

from .core.config import Settings
from .core.logging import configure_logging
from .oracles.cryptocompare import CryptoCompareOracle
from .presentation.board import BoardState, MarketsBoard
from .presentation.table import render_board
from .sources.perps_v2 import PerpsV2MarketDataSource

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perps-markets",
        description="List perpetual-futures markets sorted by market size.",
    )
    parser.add_argument("--rpc-url", default=settings.rpc_url, help="JSON-RPC endpoint of the target chain.")
    parser.add_argument(
        "--contract-address",
        default=settings.contract_address,
        help="Perps V2 market data contract address (env: CONTRACT_ADDRESS).",
    )
    parser.add_argument(
        "--api-key",
        default=settings.price_api_key,
        help="Price quote service API key (env: PRICE_API_KEY).",
    )
    parser.add_argument(
        "--compact",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force compact figures instead of following the terminal width.",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s).")
    return parser


async def run(args: argparse.Namespace, settings: Settings, console: Console) -> BoardState:
    source = PerpsV2MarketDataSource(
        contract_address=args.contract_address,
        rpc_url=args.rpc_url,
        timeout=settings.request_timeout_sec,
    )
    oracle = CryptoCompareOracle(
        api_key=args.api_key,
        base_url=settings.price_api_url,
        timeout=settings.request_timeout_sec,
    )
    board = MarketsBoard(
        source=source,
        oracle=oracle,
        error_message=settings.error_message,
        compact_breakpoint=settings.compact_breakpoint,
        compact=args.compact,
    )
    try:
        with Live(render_board(board), console=console, auto_refresh=False) as live:
            board.on_change = lambda current: live.update(render_board(current), refresh=True)
            async with board:
                state = await board.wait()
            live.update(render_board(board), refresh=True)
    finally:
        source.close()
        oracle.close()
    return state


def main(argv: Sequence[str] | None = None) -> int:
    settings = Settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.log_level)
    if not args.api_key:
        logger.warning("No price API key configured; USD market sizes may show as $0.00")
    state = asyncio.run(run(args, settings, Console()))
    return 0 if state is BoardState.READY else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
