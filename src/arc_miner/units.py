"""Fixed-point token amount helpers."""

from __future__ import annotations

import re
from decimal import Decimal

DEFAULT_DECIMALS = 6

_FIXED_POINT = re.compile(r"[0-9]+(\.[0-9]+)?")


def format_units(value: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render an integer amount of smallest units as a fixed-point string.

    >>> format_units(200_000000, 6)
    '200.000000'
    """
    scaled = Decimal(value).scaleb(-decimals)
    return f"{scaled:.{decimals}f}"


def parse_amount(amount: str) -> Decimal | None:
    """Parse a non-negative fixed-point decimal string, or return None.

    Only plain digits with an optional fractional part are accepted; signs,
    exponents and digit separators are not.
    """
    if not isinstance(amount, str):
        return None
    text = amount.strip()
    if not _FIXED_POINT.fullmatch(text):
        return None
    return Decimal(text)
