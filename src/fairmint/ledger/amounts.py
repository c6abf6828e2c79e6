# src/fairmint/ledger/amounts.py
from __future__ import annotations

"""Exact base-unit helpers.

Amounts are Python ints in base units (1 token = 10**COIN_DECIMALS units).
Nothing in here converts an amount to float except the percentage helpers,
which exist for display.
"""

import re
from typing import Any

from fairmint.ledger.constants import COIN_DECIMALS
from fairmint.runtime.errors import InvalidInput

# ASCII digits only; str.isdigit() also accepts superscripts and other scripts.
_DECIMAL_RE = re.compile(r"-?[0-9]+")


def as_height(v: Any, *, field: str = "height") -> int:
    """Validate a height: a non-negative int. bool and str are rejected."""
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidInput("invalid_height", f"{field}_must_be_int", {field: repr(v)})
    if v < 0:
        raise InvalidInput("invalid_height", f"{field}_must_be_non_negative", {field: v})
    return int(v)


def as_amount(v: Any, *, field: str = "amount") -> int:
    """Parse an amount from an int or a decimal string ("1,000" is accepted).

    Floats are rejected: they cannot carry base units exactly.
    """
    if isinstance(v, bool):
        raise InvalidInput("invalid_amount", f"{field}_must_be_integer", {field: repr(v)})
    if isinstance(v, int):
        n = int(v)
    elif isinstance(v, str):
        s = v.replace(",", "").replace("_", "").strip()
        if not _DECIMAL_RE.fullmatch(s):
            raise InvalidInput("invalid_amount", f"{field}_not_decimal_string", {field: v})
        n = int(s)
    else:
        raise InvalidInput("invalid_amount", f"{field}_must_be_integer", {field: repr(v)})

    if n < 0:
        raise InvalidInput("invalid_amount", f"{field}_must_be_non_negative", {field: str(n)})
    return n


def as_timestamp(v: Any, *, field: str = "timestamp") -> int:
    """Unix seconds from an int or decimal string. Missing or empty means 0."""
    if v is None or v == "":
        return 0
    if isinstance(v, str):
        s = v.strip()
        if not _DECIMAL_RE.fullmatch(s):
            raise InvalidInput("invalid_timestamp", f"{field}_not_decimal_string", {field: v})
        v = int(s)
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidInput("invalid_timestamp", f"{field}_must_be_int", {field: repr(v)})
    if v < 0:
        raise InvalidInput("invalid_timestamp", f"{field}_must_be_non_negative", {field: v})
    return int(v)


def percent_of(part: int, total: int, places: int = 2) -> float:
    """part/total as a percentage, truncated to `places` decimals.

    Integer division happens first; the float conversion is the last step.
    """
    if total <= 0:
        return 0.0
    scale = 10**places
    return (int(part) * 100 * scale // int(total)) / scale


def format_units(value: int, decimals: int = COIN_DECIMALS) -> str:
    """Exact token string for a base-unit amount, e.g. 5_000_000_000 -> "50.00000000"."""
    v = int(value)
    sign = "-" if v < 0 else ""
    v = abs(v)
    if decimals <= 0:
        return f"{sign}{v}"
    whole, frac = divmod(v, 10**decimals)
    return f"{sign}{whole}.{frac:0{decimals}d}"


def to_decimal_string(value: int) -> str:
    """Encoding used whenever an amount crosses a process boundary."""
    return str(int(value))
