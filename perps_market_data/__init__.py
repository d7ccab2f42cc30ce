"""Perpetual-futures market summaries client.

This module exposes the public API: the on-chain market data source, the
native asset price oracle, the conversion helpers, and the markets board that
combines them for display.
"""

from .contracts.interface import MarketSummarySource, NativePriceSource
from .core.errors import DataFetchError, MarketDataError, OracleFetchError
from .core.units import (
    decode_asset_id,
    fixed_point_to_decimal,
    format_currency,
    format_fee_percentage,
    to_usd,
)
from .models.markets import DisplayMarket, FeeRates, MarketRow, OraclePrice, RawMarketSummary
from .oracles.cryptocompare import CryptoCompareOracle
from .presentation.board import BoardState, MarketsBoard, TerminalResizeWatcher
from .presentation.table import render_board
from .sources.perps_v2 import PerpsV2MarketDataSource

__all__ = [
    "MarketSummarySource",
    "NativePriceSource",
    "PerpsV2MarketDataSource",
    "CryptoCompareOracle",
    "MarketsBoard",
    "BoardState",
    "TerminalResizeWatcher",
    "render_board",
    "DisplayMarket",
    "FeeRates",
    "MarketRow",
    "OraclePrice",
    "RawMarketSummary",
    "decode_asset_id",
    "fixed_point_to_decimal",
    "to_usd",
    "format_currency",
    "format_fee_percentage",
    "MarketDataError",
    "DataFetchError",
    "OracleFetchError",
]
