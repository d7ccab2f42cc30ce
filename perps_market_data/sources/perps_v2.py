"""On-chain perps V2 market summaries data source."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Sequence

import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from ..contracts.interface import MarketSummarySource
from ..core.errors import DataFetchError
from ..core.units import decode_asset_id
from ..models.markets import FeeRates, RawMarketSummary

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://mainnet.optimism.io"
DEFAULT_TIMEOUT = 10.0

_FEE_RATES_COMPONENTS = [
    {"internalType": "uint256", "name": "takerFee", "type": "uint256"},
    {"internalType": "uint256", "name": "makerFee", "type": "uint256"},
    {"internalType": "uint256", "name": "takerFeeDelayedOrder", "type": "uint256"},
    {"internalType": "uint256", "name": "makerFeeDelayedOrder", "type": "uint256"},
    {"internalType": "uint256", "name": "takerFeeOffchainDelayedOrder", "type": "uint256"},
    {"internalType": "uint256", "name": "makerFeeOffchainDelayedOrder", "type": "uint256"},
]

_MARKET_SUMMARY_COMPONENTS = [
    {"internalType": "address", "name": "market", "type": "address"},
    {"internalType": "bytes32", "name": "asset", "type": "bytes32"},
    {"internalType": "bytes32", "name": "key", "type": "bytes32"},
    {"internalType": "uint256", "name": "maxLeverage", "type": "uint256"},
    {"internalType": "uint256", "name": "price", "type": "uint256"},
    {"internalType": "uint256", "name": "marketSize", "type": "uint256"},
    {"internalType": "int256", "name": "marketSkew", "type": "int256"},
    {"internalType": "uint256", "name": "marketDebt", "type": "uint256"},
    {"internalType": "int256", "name": "currentFundingRate", "type": "int256"},
    {"internalType": "int256", "name": "currentFundingVelocity", "type": "int256"},
    {
        "components": _FEE_RATES_COMPONENTS,
        "internalType": "struct PerpsV2MarketData.FeeRates",
        "name": "feeRates",
        "type": "tuple",
    },
]

PERPS_V2_MARKET_DATA_ABI = [
    {
        "inputs": [],
        "name": "allMarketSummaries",
        "outputs": [
            {
                "components": _MARKET_SUMMARY_COMPONENTS,
                "internalType": "struct PerpsV2MarketData.MarketSummary[]",
                "name": "",
                "type": "tuple[]",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    }
]

_SUMMARY_FIELDS = tuple(component["name"] for component in _MARKET_SUMMARY_COMPONENTS)
_FEE_RATE_FIELDS = tuple(component["name"] for component in _FEE_RATES_COMPONENTS)


class PerpsV2MarketDataSource(MarketSummarySource):
    """Web3-backed implementation of :class:`MarketSummarySource`.

    Every call to :meth:`get_market_summaries` issues exactly one ``eth_call``
    against the configured market data contract; nothing is cached.
    """

    def __init__(
        self,
        *,
        contract_address: str,
        rpc_url: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        web3: Web3 | None = None,
    ) -> None:
        self._contract_address = (contract_address or "").strip()
        self._session: requests.Session | None = None
        if web3 is None:
            self._session = requests.Session()
            web3 = Web3(
                Web3.HTTPProvider(
                    rpc_url,
                    request_kwargs={"timeout": timeout},
                    session=self._session,
                )
            )
        self._web3 = web3

    def get_market_summaries(self) -> Sequence[RawMarketSummary]:
        address = self._checksum_address()
        contract = self._web3.eth.contract(address=address, abi=PERPS_V2_MARKET_DATA_ABI)
        try:
            payload = contract.functions.allMarketSummaries().call()
        except (Web3Exception, requests.RequestException, ValueError) as exc:
            raise DataFetchError(f"Failed to call allMarketSummaries on {address}: {exc}") from exc
        if not isinstance(payload, Sequence):
            raise DataFetchError("allMarketSummaries returned an unexpected payload")
        summaries = [self._parse_summary(entry) for entry in payload]
        logger.info("Fetched %d market summaries from %s", len(summaries), address)
        return summaries

    # ------------------------------------------------------------------
    # Internal helpers
    def close(self) -> None:
        if self._session is not None:
            self._session.close()

    def _checksum_address(self) -> str:
        if not self._contract_address:
            raise DataFetchError("Market data contract address is not configured")
        if not Web3.is_address(self._contract_address):
            raise DataFetchError(f"Invalid market data contract address: {self._contract_address!r}")
        return Web3.to_checksum_address(self._contract_address)

    def _parse_summary(self, raw: Any) -> RawMarketSummary:
        summary = _as_mapping(raw, _SUMMARY_FIELDS, "market summary")
        fees = _as_mapping(summary["feeRates"], _FEE_RATE_FIELDS, "fee rates")
        try:
            asset = decode_asset_id(summary["asset"])
        except (TypeError, ValueError) as exc:
            raise DataFetchError(f"Undecodable market asset id: {summary['asset']!r}") from exc
        fee_rates: FeeRates = {
            "maker_fee": _uint_string(fees["makerFee"], "makerFee"),
            "taker_fee": _uint_string(fees["takerFee"], "takerFee"),
        }
        return {
            "market": str(summary["market"]),
            "asset": asset,
            "price": _uint_string(summary["price"], "price"),
            "market_size": _uint_string(summary["marketSize"], "marketSize"),
            "fee_rates": fee_rates,
        }


def _as_mapping(raw: Any, fields: Sequence[str], label: str) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        missing = [name for name in fields if name not in raw]
        if missing:
            raise DataFetchError(f"Unexpected {label} payload, missing {', '.join(missing)}")
        return raw
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)) and len(raw) == len(fields):
        return dict(zip(fields, raw))
    raise DataFetchError(f"Unexpected {label} payload structure")


def _uint_string(value: Any, field: str) -> str:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DataFetchError(f"Field {field} is not an unsigned integer: {value!r}")
    return str(value)
