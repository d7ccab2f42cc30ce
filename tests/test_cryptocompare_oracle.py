from __future__ import annotations

import pytest
import requests

from perps_market_data.core.errors import OracleFetchError
from perps_market_data.oracles import cryptocompare as cryptocompare_module
from perps_market_data.oracles.cryptocompare import CryptoCompareOracle
from tests.stubs import StubSession


@pytest.fixture()
def session_and_oracle():
    session = StubSession()
    oracle = CryptoCompareOracle(api_key="secret", session=session)
    return session, oracle


def test_get_native_price_request_shape(session_and_oracle):
    session, oracle = session_and_oracle
    session.queue({"USD": 1834.21})

    price = oracle.get_native_price()

    assert price == pytest.approx(1834.21)
    call = session.calls[-1]
    assert call["url"] == f"{cryptocompare_module.BASE_URL}{cryptocompare_module.PRICE_ENDPOINT}"
    assert call["params"] == {"fsym": "ETH", "tsyms": "USD"}
    assert call["headers"] == {"authorization": "Apikey secret"}
    assert call["timeout"] == cryptocompare_module.DEFAULT_TIMEOUT


def test_get_native_price_accepts_integer_quotes(session_and_oracle):
    session, oracle = session_and_oracle
    session.queue({"USD": 2000})

    assert oracle.get_native_price() == 2000.0


def test_get_native_price_wraps_network_errors(session_and_oracle):
    session, oracle = session_and_oracle
    session.queue_error(requests.ConnectionError("boom"))

    with pytest.raises(OracleFetchError):
        oracle.get_native_price()


def test_get_native_price_rejects_non_json(session_and_oracle):
    session, oracle = session_and_oracle
    session.queue(None, invalid_json=True)

    with pytest.raises(OracleFetchError):
        oracle.get_native_price()


def test_get_native_price_surfaces_api_errors(session_and_oracle):
    session, oracle = session_and_oracle
    session.queue({"Response": "Error", "Message": "You are over your rate limit"})

    with pytest.raises(OracleFetchError, match="rate limit"):
        oracle.get_native_price()


@pytest.mark.parametrize("payload", [{}, {"USD": "2000"}, {"USD": None}, {"USD": True}, ["USD", 1]])
def test_get_native_price_rejects_malformed_payload(session_and_oracle, payload):
    session, oracle = session_and_oracle
    session.queue(payload)

    with pytest.raises(OracleFetchError):
        oracle.get_native_price()


def test_get_native_price_rejects_http_errors(session_and_oracle):
    session, oracle = session_and_oracle
    session.queue({"Message": "unauthorized"}, status_code=401)

    with pytest.raises(OracleFetchError, match="401"):
        oracle.get_native_price()


def test_close_leaves_injected_session_open(session_and_oracle):
    session, oracle = session_and_oracle

    oracle.close()

    assert session.closed is False
