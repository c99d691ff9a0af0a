# tests/test_helpers.py

from decimal import Decimal

import pytest

from pharmacy_pos.utils.helpers import fmt_money, round_money, round_whole
from pharmacy_pos.utils.validators import try_parse_decimal


# ---------------------------
# Suite H: money helpers
# ---------------------------

@pytest.mark.parametrize(
    "value, expected",
    [
        ("1e30", "1,000,000,000,000,000,000,000,000,000,000.00"),
        (1e27, "1,000,000,000,000,000,000,000,000,000.00"),
        ("9" * 30, "999,999,999,999,999,999,999,999,999,999.00"),
        ("1234.565", "1,234.57"),
    ],
)
def test_h1_fmt_money_handles_wide_values(value, expected):
    """H1. fmt_money never raises on large finite input; thousands separators kept."""
    assert fmt_money(value) == expected
    assert fmt_money(value, sentinel="—") == expected


def test_h2_round_money_and_whole_beyond_default_precision():
    """H2. Rounding keeps every integer digit of a 31-digit amount."""
    assert round_money("1234567890123456789012345678901.005") == Decimal("1234567890123456789012345678901.01")
    assert round_whole("9" * 30 + ".5") == Decimal("1" + "0" * 30)


@pytest.mark.parametrize("value", ["1e400", "-1e400", Decimal("1e-400")])
def test_h3_out_of_range_magnitudes_are_not_numbers(value):
    """H3. Absurd exponents parse as failures so callers fall back to 0 or the sentinel."""
    assert try_parse_decimal(value) == (False, None)
    assert fmt_money(value, sentinel="—") == "—"
    assert round_money(value) == Decimal("0.00")
