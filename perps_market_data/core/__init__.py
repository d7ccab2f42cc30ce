"""Core utilities for perps market data."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "Settings",
    "configure_logging",
    "MarketDataError",
    "DataFetchError",
    "OracleFetchError",
    "decode_asset_id",
    "fixed_point_to_decimal",
    "to_usd",
    "format_currency",
    "format_fee_percentage",
]

_lazy_targets = {
    "Settings": ("config", "Settings"),
    "configure_logging": ("logging", "configure_logging"),
    "MarketDataError": ("errors", "MarketDataError"),
    "DataFetchError": ("errors", "DataFetchError"),
    "OracleFetchError": ("errors", "OracleFetchError"),
    "decode_asset_id": ("units", "decode_asset_id"),
    "fixed_point_to_decimal": ("units", "fixed_point_to_decimal"),
    "to_usd": ("units", "to_usd"),
    "format_currency": ("units", "format_currency"),
    "format_fee_percentage": ("units", "format_fee_percentage"),
}


def __getattr__(name: str) -> Any:
    try:
        module_name, attr_name = _lazy_targets[name]
    except KeyError as exc:
        raise AttributeError(f"module 'perps_market_data.core' has no attribute {name!r}") from exc
    module = import_module(f"{__name__}.{module_name}")
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
