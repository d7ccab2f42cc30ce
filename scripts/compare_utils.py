"""Shared helpers for manual oracle-vs-CCXT price comparisons."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys
from typing import Callable, Iterable, Sequence

import ccxt  # type: ignore

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from perps_market_data.oracles.cryptocompare import CryptoCompareOracle


@dataclass(slots=True)
class ReferenceCase:
    name: str
    ccxt_factory: Callable[[dict[str, object]], ccxt.Exchange]
    ccxt_symbol: str


CASES: Sequence[ReferenceCase] = (
    ReferenceCase(name="binance", ccxt_factory=ccxt.binance, ccxt_symbol="ETH/USDT"),
    ReferenceCase(name="coinbase", ccxt_factory=ccxt.coinbase, ccxt_symbol="ETH/USD"),
    ReferenceCase(name="kraken", ccxt_factory=ccxt.kraken, ccxt_symbol="ETH/USD"),
)


def iter_cases(targets: Iterable[str] | None = None) -> Iterable[ReferenceCase]:
    if not targets:
        yield from CASES
        return
    selected = {t.lower() for t in targets}
    for case in CASES:
        if case.name.lower() in selected:
            yield case


def oracle_factory() -> CryptoCompareOracle:
    return CryptoCompareOracle(api_key=os.environ.get("PRICE_API_KEY", ""))
