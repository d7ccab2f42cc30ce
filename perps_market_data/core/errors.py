"""Custom exception hierarchy for perps market data fetching."""

from __future__ import annotations


class MarketDataError(RuntimeError):
    """Base class for all domain-specific exceptions."""


class DataFetchError(MarketDataError):
    """Raised when the market summaries contract call or its decoding fails."""


class OracleFetchError(MarketDataError):
    """Raised when the native asset price quote cannot be obtained."""
