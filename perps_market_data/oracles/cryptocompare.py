"""CryptoCompare price oracle for the chain's native asset."""

from __future__ import annotations

import logging
import math
from typing import Any

import requests

from ..contracts.interface import NativePriceSource
from ..core.errors import OracleFetchError

logger = logging.getLogger(__name__)

BASE_URL = "https://min-api.cryptocompare.com"
PRICE_ENDPOINT = "/data/price"
DEFAULT_TIMEOUT = 10.0


class CryptoCompareOracle(NativePriceSource):
    """Requests-backed implementation of :class:`NativePriceSource`."""

    def __init__(
        self,
        *,
        api_key: str,
        session: requests.Session | None = None,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        symbol: str = "ETH",
        currency: str = "USD",
    ) -> None:
        self._api_key = api_key
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._symbol = symbol
        self._currency = currency

    def get_native_price(self) -> float:
        payload = self._request(PRICE_ENDPOINT, {"fsym": self._symbol, "tsyms": self._currency})
        if not isinstance(payload, dict):
            raise OracleFetchError("CryptoCompare returned an unexpected payload")
        if payload.get("Response") == "Error":
            raise OracleFetchError(payload.get("Message") or "CryptoCompare returned an error")
        price = payload.get(self._currency)
        if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price):
            raise OracleFetchError(f"CryptoCompare payload missing numeric {self._currency} price")
        logger.debug("%s/%s price %s", self._symbol, self._currency, price)
        return float(price)

    # ------------------------------------------------------------------
    # Internal helpers
    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def _request(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        headers = {"authorization": f"Apikey {self._api_key}"}
        try:
            response = self._session.get(url, params=params, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise OracleFetchError(f"Failed to call CryptoCompare endpoint {path}: {exc}") from exc
        if response.status_code >= 400:
            raise OracleFetchError(f"CryptoCompare endpoint {path} returned HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise OracleFetchError("CryptoCompare returned a non-JSON payload") from exc
