"""State holder combining market summaries with the native asset price."""

from __future__ import annotations

import asyncio
import logging
import shutil
import signal
from collections.abc import Callable, Sequence
from decimal import Decimal
from enum import StrEnum

from ..contracts.interface import MarketSummarySource, NativePriceSource
from ..core.errors import MarketDataError, OracleFetchError
from ..core.units import (
    fixed_point_to_decimal,
    format_currency,
    format_fee_percentage,
    to_usd,
)
from ..models.markets import DisplayMarket, MarketRow, OraclePrice, RawMarketSummary

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to fetch market data"
DEFAULT_COMPACT_BREAKPOINT = 100
MARKET_NAME_SUFFIX = "-PERP"

WidthProvider = Callable[[], int]
ChangeListener = Callable[["MarketsBoard"], None]


class BoardState(StrEnum):
    """Lifecycle of a single markets load."""

    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


def to_display_market(summary: RawMarketSummary) -> DisplayMarket:
    """Convert the fixed-point fields of ``summary`` into decimal strings."""

    fee_rates = summary["fee_rates"]
    return DisplayMarket(
        name=f"{summary['asset']}{MARKET_NAME_SUFFIX}",
        size=fixed_point_to_decimal(summary["market_size"]),
        price=fixed_point_to_decimal(summary["price"]),
        maker_fee=fixed_point_to_decimal(fee_rates["maker_fee"]),
        taker_fee=fixed_point_to_decimal(fee_rates["taker_fee"]),
    )


def sort_by_size(markets: Sequence[DisplayMarket]) -> list[DisplayMarket]:
    """Order markets by numeric size, largest first; ties keep input order."""

    return sorted(markets, key=lambda market: Decimal(market.size), reverse=True)


def build_rows(
    markets: Sequence[DisplayMarket],
    native_price: OraclePrice,
    *,
    compact: bool = False,
) -> list[MarketRow]:
    rows: list[MarketRow] = []
    for index, market in enumerate(sort_by_size(markets)):
        maker = format_fee_percentage(market.maker_fee, market.price, compact)
        taker = format_fee_percentage(market.taker_fee, market.price, compact)
        rows.append(
            MarketRow(
                market=market.name,
                price=format_currency(market.price, compact),
                size=format_currency(to_usd(market.size, native_price), compact),
                fees=f"{maker}/{taker}",
                striped=index % 2 == 1,
            )
        )
    return rows


def terminal_width() -> int:
    return shutil.get_terminal_size().columns


class TerminalResizeWatcher:
    """Reports terminal width changes observed through ``SIGWINCH``."""

    def __init__(self, *, width_provider: WidthProvider = terminal_width) -> None:
        self._width_provider = width_provider
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def active(self) -> bool:
        return self._loop is not None

    def width(self) -> int:
        return self._width_provider()

    def start(self, loop: asyncio.AbstractEventLoop, callback: Callable[[int], None]) -> None:
        sigwinch = getattr(signal, "SIGWINCH", None)
        if sigwinch is None:
            logger.debug("SIGWINCH unavailable; terminal resizes are not tracked")
            return
        try:
            loop.add_signal_handler(sigwinch, lambda: callback(self.width()))
        except (NotImplementedError, RuntimeError, ValueError) as exc:
            logger.debug("Cannot track terminal resizes: %s", exc)
            return
        self._loop = loop

    def stop(self) -> None:
        if self._loop is None:
            return
        self._loop.remove_signal_handler(signal.SIGWINCH)
        self._loop = None


class MarketsBoard:
    """Loads market summaries and the native asset price for display.

    The board is an async context manager. Entering it starts the two fetches
    as independent tasks and starts watching the terminal width; leaving it
    cancels whatever is still pending and stops the watcher. Results that
    arrive after the board was left are dropped.
    """

    def __init__(
        self,
        *,
        source: MarketSummarySource,
        oracle: NativePriceSource,
        error_message: str = DEFAULT_ERROR_MESSAGE,
        compact_breakpoint: int = DEFAULT_COMPACT_BREAKPOINT,
        compact: bool | None = None,
        resize_watcher: TerminalResizeWatcher | None = None,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._source = source
        self._oracle = oracle
        self._error_message = error_message
        self._compact_breakpoint = compact_breakpoint
        self._compact_override = compact
        self._resize_watcher = resize_watcher or TerminalResizeWatcher()
        self.on_change = on_change

        self._state = BoardState.LOADING
        self._error: str | None = None
        self._markets: list[DisplayMarket] = []
        self._native_price: OraclePrice = None
        self._compact = bool(compact)
        self._mounted = False
        self._tasks: list[asyncio.Task[None]] = []

    # ------------------------------------------------------------------
    # State
    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def markets(self) -> list[DisplayMarket]:
        return list(self._markets)

    @property
    def native_price(self) -> OraclePrice:
        return self._native_price

    @property
    def compact(self) -> bool:
        return self._compact

    @property
    def mounted(self) -> bool:
        return self._mounted

    def rows(self) -> list[MarketRow]:
        """Return formatted rows; empty unless the board is ready."""

        if self._state is not BoardState.READY:
            return []
        return build_rows(self._markets, self._native_price, compact=self._compact)

    # ------------------------------------------------------------------
    # Lifecycle
    async def __aenter__(self) -> MarketsBoard:
        self.mount()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.unmount()

    def mount(self) -> None:
        if self._mounted:
            raise RuntimeError("MarketsBoard is already mounted")
        loop = asyncio.get_running_loop()
        self._mounted = True
        self._state = BoardState.LOADING
        self._error = None
        self._markets = []
        self._apply_width(self._resize_watcher.width())
        self._resize_watcher.start(loop, self._on_resize)
        self._tasks = [
            loop.create_task(self._load_markets()),
            loop.create_task(self._load_native_price()),
        ]

    async def wait(self) -> BoardState:
        """Wait for both fetches to finish and return the resulting state."""

        if self._tasks:
            await asyncio.gather(*self._tasks)
        return self._state

    async def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        self._resize_watcher.stop()
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks = []

    # ------------------------------------------------------------------
    # Internal helpers
    async def _load_markets(self) -> None:
        try:
            summaries = await asyncio.to_thread(self._source.get_market_summaries)
            markets = [to_display_market(summary) for summary in summaries]
        except (MarketDataError, ValueError) as exc:
            logger.error("Failed to fetch market summaries: %s", exc)
            if self._mounted:
                self._state = BoardState.ERROR
                self._error = self._error_message
                self._markets = []
                self._notify()
            return
        if not self._mounted:
            logger.debug("Dropping market summaries received after unmount")
            return
        self._markets = markets
        self._state = BoardState.READY
        self._notify()

    async def _load_native_price(self) -> None:
        try:
            price = await asyncio.to_thread(self._oracle.get_native_price)
        except OracleFetchError as exc:
            logger.warning("Native asset price unavailable: %s", exc)
            return
        if not self._mounted:
            return
        self._native_price = price
        self._notify()

    def _on_resize(self, width: int) -> None:
        if self._apply_width(width):
            self._notify()

    def _apply_width(self, width: int) -> bool:
        if self._compact_override is not None:
            compact = self._compact_override
        else:
            compact = width < self._compact_breakpoint
        changed = compact != self._compact
        self._compact = compact
        return changed

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
