import math
from decimal import Decimal

from utils.formatting import as_int, as_number, one_decimal, round_half_up


def test_non_numeric_aggregates_default_to_zero():
    assert as_number(None) == 0
    assert as_number("n/a") == 0
    assert as_number(math.nan) == 0
    assert as_int(None) == 0
    assert as_int(Decimal("4")) == 4
    assert as_int("7") == 7


def test_one_decimal():
    assert one_decimal(None) == "0.0"
    assert one_decimal(7) == "7.0"
    assert one_decimal(7.25) == "7.3"
    assert one_decimal(Decimal("6.6666")) == "6.7"


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(74.4) == 74
    assert round_half_up(0) == 0
