"""Rich rendering of the markets board."""

from __future__ import annotations

from rich.table import Table

from .board import BoardState, MarketsBoard

COLUMNS = ("MARKET", "PRICE", "MARKET SIZE", "MAKER/TAKER")
ROW_STYLE = "on #212121"
STRIPED_ROW_STYLE = "on #1a1a1a"
HEADER_STYLE = "bold #ffffff on #313131"
LOADING_MESSAGE = "Loading markets..."


def render_board(board: MarketsBoard) -> Table:
    """Build the four column markets table for the board's current state."""

    caption = None
    caption_style = None
    if board.state is BoardState.LOADING:
        caption = LOADING_MESSAGE
    elif board.state is BoardState.ERROR:
        caption = board.error
        caption_style = "bold red"

    table = Table(
        header_style=HEADER_STYLE,
        caption=caption,
        caption_style=caption_style,
        expand=not board.compact,
    )
    table.add_column(COLUMNS[0], style="bold #ffffff", no_wrap=True)
    for title in COLUMNS[1:]:
        table.add_column(title, style="#cacaca", justify="right")

    for row in board.rows():
        table.add_row(
            row.market,
            row.price,
            row.size,
            row.fees,
            style=STRIPED_ROW_STYLE if row.striped else ROW_STYLE,
        )
    return table
