"""Compare the CryptoCompare native asset price against CCXT tickers."""
from __future__ import annotations

from typing import Iterable

import sys

import ccxt  # type: ignore

from compare_utils import iter_cases, oracle_factory


def main(targets: Iterable[str] | None = None) -> None:
    print("\n=== cryptocompare ETH/USD ===")
    oracle = oracle_factory()
    reference = None
    try:
        reference = oracle.get_native_price()
        print(f"oracle price={reference}")
    except Exception as exc:
        print(f"oracle error: {exc}")
    finally:
        oracle.close()

    for case in iter_cases(targets):
        print(f"\n=== {case.name} {case.ccxt_symbol} ===")
        exchange = case.ccxt_factory({"enableRateLimit": True})
        try:
            ticker = exchange.fetch_ticker(case.ccxt_symbol)
            last = ticker.get("last")
            print(f"ccxt last={last}")
            if reference and last:
                print(f"deviation={(float(last) - reference) / reference * 100:.4f}%")
        except ccxt.BaseError as exc:
            print(f"ccxt error: {exc}")
        finally:
            try:
                exchange.close()
            except Exception:
                pass


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:] or None)
