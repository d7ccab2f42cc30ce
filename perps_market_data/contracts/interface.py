"""Protocols describing the data sources consumed by the markets board."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ..models.markets import RawMarketSummary


@runtime_checkable
class MarketSummarySource(Protocol):
    """Data source capable of listing perpetual-futures market summaries."""

    def get_market_summaries(self) -> Sequence[RawMarketSummary]:
        """Return the summaries of every market, in contract order."""

    def close(self) -> None:
        """Release any resources owned by the source."""


@runtime_checkable
class NativePriceSource(Protocol):
    """Price oracle quoting the chain's native asset in USD."""

    def get_native_price(self) -> float:
        """Return the current USD price of the native asset."""

    def close(self) -> None:
        """Release any resources owned by the source."""
