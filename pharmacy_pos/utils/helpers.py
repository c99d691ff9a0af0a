# utils/helpers.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, getcontext, localcontext
import logging
from typing import Union, Optional

from ..constants import MONEY_PLACES
from .validators import try_parse_decimal

NumberLike = Union[float, int, str, Decimal]

_log = logging.getLogger(__name__)

CENT = Decimal(1).scaleb(-MONEY_PLACES)
WHOLE = Decimal(1)


def to_decimal(v, default: Decimal = Decimal(0)) -> Decimal:
    """Coerce anything number-ish to Decimal; missing, invalid or non-finite gives `default`."""
    ok, val = try_parse_decimal(v)
    if not ok:
        if v is not None and not (isinstance(v, str) and not v.strip()):
            _log.debug("to_decimal: treating %r as %s", v, default)
        return default
    return val  # type: ignore[return-value]


def _quantize(d: Decimal, exp: Decimal) -> Decimal:
    # quantize raises once the result has more digits than the context precision
    need = max(d.adjusted(), 0) - exp.as_tuple().exponent + 2
    with localcontext() as ctx:
        ctx.prec = max(getcontext().prec, need)
        return d.quantize(exp, rounding=ROUND_HALF_UP)


def round_money(v) -> Decimal:
    """Round to cents, half away from zero (0.005 -> 0.01, -0.005 -> -0.01)."""
    return _quantize(to_decimal(v), CENT)


def round_whole(v) -> Decimal:
    """Round to a whole currency unit, half away from zero."""
    return _quantize(to_decimal(v), WHOLE)


def fmt_money(
    v: NumberLike,
    places: int = MONEY_PLACES,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "—"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    ok, x = try_parse_decimal(v)
    if not ok:
        _log.debug("fmt_money: failed to parse %r as a number", v)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.")
        return str(sentinel) if sentinel is not None else str(v)
    q = Decimal(1).scaleb(-places) if places > 0 else WHOLE
    return f"{_quantize(x, q):,.{places}f}"


def fmt_quantity(v) -> str:
    """Plain quantity text: 12 -> '12', 1.50 -> '1.5', never scientific notation."""
    d = to_decimal(v)
    if d == d.to_integral_value():
        return str(int(d))
    return format(d.normalize(), "f")
