"""Data contracts for perpetual-futures market summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias, TypedDict


class FeeRates(TypedDict):
    """Maker/taker fees as 18-decimal fixed-point integers encoded as strings."""

    maker_fee: str
    taker_fee: str


class RawMarketSummary(TypedDict):
    """One market summary as returned by ``allMarketSummaries()``."""

    market: str
    asset: str
    price: str
    market_size: str
    fee_rates: FeeRates


# ``None`` until the price quote resolves, and when it fails.
OraclePrice: TypeAlias = float | None


@dataclass(frozen=True, slots=True)
class DisplayMarket:
    """Decimal view of a market summary, ready to be formatted."""

    name: str
    size: str
    price: str
    maker_fee: str
    taker_fee: str


@dataclass(frozen=True, slots=True)
class MarketRow:
    """Formatted table cells for a single market."""

    market: str
    price: str
    size: str
    fees: str
    striped: bool = False
