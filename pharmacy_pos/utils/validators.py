# utils/validators.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation

# beyond 10**MAX_MAGNITUDE a value is not a usable amount or quantity
MAX_MAGNITUDE = 100


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


# ---- Numeric parsing & validators ----

def try_parse_decimal(x):
    """
    Best-effort parse to a finite Decimal.

    Floats go through str() first so 19.955 stays 19.955 rather than the
    binary expansion. NaN, infinities and magnitudes past 10**MAX_MAGNITUDE
    count as failures.

    Returns:
        (ok: bool, value: Decimal|None)
    """
    if x is None or isinstance(x, bool):
        return False, None
    try:
        if isinstance(x, Decimal):
            val = x
        elif isinstance(x, float):
            val = Decimal(str(x))
        elif isinstance(x, int):
            val = Decimal(x)
        else:
            val = Decimal(str(x).strip())
    except (InvalidOperation, ValueError, TypeError):
        return False, None
    if not val.is_finite() or (val and abs(val.adjusted()) > MAX_MAGNITUDE):
        return False, None
    return True, val


def parse_quantity(x) -> Decimal:
    """
    Quantity text as typed into an input box. Empty or invalid means 0.
    """
    ok, val = try_parse_decimal(x)
    return val if ok else Decimal(0)  # type: ignore[return-value]
