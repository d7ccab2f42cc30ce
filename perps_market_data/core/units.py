"""Fixed-point conversion and display formatting helpers.

On-chain quantities are integers scaled by ``10**18``. The helpers below turn
them into decimal strings using integer arithmetic only, so arbitrarily large
values keep every digit of their integer part, and then format those decimals
as USD amounts and fee percentages for display.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

FIXED_POINT_DECIMALS = 18
ASSET_ID_LENGTH = 32
ZERO_PERCENT = "0.00%"
# Compact fee percentages above this threshold are shown in millions.
COMPACT_PERCENT_THRESHOLD = 100_000

_COMPACT_UNITS: tuple[tuple[str, float], ...] = (
    ("T", 1e12),
    ("B", 1e9),
    ("M", 1e6),
    ("K", 1e3),
)


def decode_asset_id(value: bytes | str) -> str:
    """Decode a ``bytes32`` asset identifier into its ticker (e.g. ``ETH``).

    ``value`` may be the raw bytes returned by the contract call or a
    ``0x``-prefixed hex string.
    """

    if isinstance(value, str):
        hex_value = value[2:] if value[:2].lower() == "0x" else value
        try:
            raw = bytes.fromhex(hex_value)
        except ValueError as exc:
            raise ValueError(f"Asset id is not valid hex: {value!r}") from exc
    else:
        raw = bytes(value)
    if len(raw) > ASSET_ID_LENGTH:
        raise ValueError(f"Asset id longer than {ASSET_ID_LENGTH} bytes")
    text = raw.rstrip(b"\x00")
    if b"\x00" in text:
        raise ValueError("Asset id contains embedded null bytes")
    return text.decode("utf-8")


def encode_asset_id(ticker: str) -> bytes:
    """Encode ``ticker`` as a null-padded ``bytes32`` value."""

    raw = ticker.encode("utf-8")
    if len(raw) >= ASSET_ID_LENGTH:
        raise ValueError(f"Ticker must be shorter than {ASSET_ID_LENGTH} bytes")
    return raw.ljust(ASSET_ID_LENGTH, b"\x00")


def fixed_point_to_decimal(value: str | int, decimals: int = FIXED_POINT_DECIMALS) -> str:
    """Convert an integer scaled by ``10**decimals`` into a decimal string.

    The output always carries a fractional part (``"2000.0"``, ``"0.0001"``).
    """

    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    if isinstance(value, bool):
        raise ValueError(f"Not a fixed-point integer: {value!r}")
    try:
        integer = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Not a fixed-point integer: {value!r}") from exc
    sign = "-" if integer < 0 else ""
    whole, fraction = divmod(abs(integer), 10**decimals)
    fraction_digits = str(fraction).zfill(decimals).rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_digits}"


def decimal_to_fixed_point(value: str | int | Decimal, decimals: int = FIXED_POINT_DECIMALS) -> str:
    """Scale a decimal value into its fixed-point integer string.

    Digits beyond ``decimals`` fractional places are truncated.
    """

    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a decimal value: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a finite decimal value: {value!r}")
    sign, digits, exponent = amount.as_tuple()
    integer = int("".join(str(digit) for digit in digits) or "0")
    shift = exponent + decimals
    if shift >= 0:
        integer *= 10**shift
    else:
        integer //= 10 ** (-shift)
    if sign and integer:
        integer = -integer
    return str(integer)


def to_usd(decimal_value: str | float | Decimal, native_usd_price: float | None) -> float:
    """Convert a native-asset amount to USD; an unknown price yields ``0.0``."""

    if native_usd_price is None or not math.isfinite(native_usd_price):
        return 0.0
    return float(decimal_value) * native_usd_price


def format_currency(value: str | float | Decimal, compact: bool = False) -> str:
    """Format ``value`` as a USD amount.

    Compact mode abbreviates thousands and above (``$1.23M``). Otherwise two
    fraction digits are used, except that amounts strictly between 0 and 0.01
    keep enough digits to show their first significant digit.
    """

    amount = float(value)
    if not math.isfinite(amount):
        amount = 0.0
    sign = "-" if amount < 0 else ""
    magnitude = abs(amount)
    if compact and magnitude >= 1_000:
        return f"{sign}${_compact_number(magnitude)}"
    if 0 < magnitude < 0.01:
        digits = -math.floor(math.log10(magnitude))
        return f"{sign}${magnitude:.{digits}f}"
    formatted = f"{magnitude:,.2f}"
    if formatted == "0.00":
        sign = ""
    return f"{sign}${formatted}"


def format_fee_percentage(
    fee: str | float | Decimal,
    price: str | float | Decimal,
    compact: bool = False,
) -> str:
    """Return ``fee`` as a percentage of ``price`` (``"0.05%"``)."""

    try:
        percentage = float(fee) / float(price) * 100
    except ZeroDivisionError:
        return ZERO_PERCENT
    if not math.isfinite(percentage):
        return ZERO_PERCENT
    if compact and percentage > COMPACT_PERCENT_THRESHOLD:
        return f"{percentage / 1_000_000:.2f}M%+"
    return f"{percentage:.2f}%"


def _compact_number(magnitude: float) -> str:
    for index, (suffix, scale) in enumerate(_COMPACT_UNITS):
        if magnitude < scale:
            continue
        scaled = round(magnitude / scale, 2)
        # 999_999 rounds to 1000K; promote it to 1M.
        if scaled >= 1_000 and index > 0:
            suffix, scale = _COMPACT_UNITS[index - 1]
            scaled = round(magnitude / scale, 2)
        text = f"{scaled:,.2f}".rstrip("0").rstrip(".")
        return f"{text}{suffix}"
    return f"{magnitude:,.2f}"
