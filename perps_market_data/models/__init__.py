"""Domain models for perps market data."""

from .markets import DisplayMarket, FeeRates, MarketRow, OraclePrice, RawMarketSummary

__all__ = [
    "DisplayMarket",
    "FeeRates",
    "MarketRow",
    "OraclePrice",
    "RawMarketSummary",
]
