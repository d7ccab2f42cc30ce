from __future__ import annotations

import asyncio

from rich.console import Console

from perps_market_data import cli
from perps_market_data.core.errors import DataFetchError
from perps_market_data.presentation.board import MarketsBoard
from perps_market_data.presentation.table import COLUMNS, LOADING_MESSAGE, render_board
from tests.stubs import ONE, StubMarketSource, StubOracle, StubResizeWatcher, raw_summary


def _render(board: MarketsBoard) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(render_board(board))
    return console.export_text()


def _loaded(source, oracle=None) -> MarketsBoard:
    async def scenario():
        board = MarketsBoard(
            source=source,
            oracle=oracle or StubOracle(2000.0),
            resize_watcher=StubResizeWatcher(width=150),
        )
        async with board:
            await board.wait()
        return board

    return asyncio.run(scenario())


def test_render_ready_board_lists_rows():
    board = _loaded(
        StubMarketSource(
            [
                raw_summary("BTC", price=str(30_000 * ONE), size=str(10 * ONE), maker_fee=str(3 * ONE)),
                raw_summary("ETH", price=str(2_000 * ONE), size=str(500 * ONE)),
            ]
        )
    )

    text = _render(board)

    for title in COLUMNS:
        assert title in text
    assert text.index("ETH-PERP") < text.index("BTC-PERP")
    assert "$30,000.00" in text
    assert "0.01%/0.00%" in text
    assert LOADING_MESSAGE not in text


def test_render_loading_board():
    board = MarketsBoard(source=StubMarketSource([]), oracle=StubOracle(1.0), resize_watcher=StubResizeWatcher())

    assert LOADING_MESSAGE in _render(board)


def test_render_error_board_replaces_rows():
    board = _loaded(StubMarketSource(error=DataFetchError("boom")))

    text = _render(board)

    assert "Failed to fetch market data" in text
    assert "-PERP" not in text


def _patch_cli(monkeypatch, source: StubMarketSource, oracle: StubOracle) -> dict:
    captured: dict = {}

    def source_factory(**kwargs):
        captured["source"] = kwargs
        return source

    def oracle_factory(**kwargs):
        captured["oracle"] = kwargs
        return oracle

    monkeypatch.setattr(cli, "PerpsV2MarketDataSource", source_factory)
    monkeypatch.setattr(cli, "CryptoCompareOracle", oracle_factory)
    monkeypatch.setattr(cli, "configure_logging", lambda level: captured.setdefault("log_level", level))
    return captured


def test_cli_renders_markets_and_exits_zero(monkeypatch, capsys):
    source = StubMarketSource([raw_summary("ETH", price=str(2_000 * ONE), size=str(500 * ONE))])
    captured = _patch_cli(monkeypatch, source, StubOracle(2000.0))

    status = cli.main(
        ["--contract-address", "0xabc", "--api-key", "k", "--compact", "--log-level", "info"]
    )

    assert status == 0
    assert captured["source"]["contract_address"] == "0xabc"
    assert captured["oracle"]["api_key"] == "k"
    assert captured["log_level"] == "info"
    assert source.closed is True
    assert "ETH-PERP" in capsys.readouterr().out


def test_cli_exits_non_zero_on_fetch_failure(monkeypatch, capsys):
    source = StubMarketSource(error=DataFetchError("down"))
    _patch_cli(monkeypatch, source, StubOracle(2000.0))

    status = cli.main(["--contract-address", "0xabc", "--api-key", "k"])

    assert status == 1
    assert "Failed to fetch market data" in capsys.readouterr().out
