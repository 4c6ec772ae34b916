import math
from decimal import Decimal, ROUND_HALF_UP


def as_number(value, default=0):
    """
    Coerce an aggregate result to a float. NULL, NaN and anything that is not
    numeric fall back to `default`.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def as_int(value, default=0):
    return int(as_number(value, default))


def one_decimal(value):
    """Format a number as a string with exactly one decimal place, halves rounded up."""
    number = Decimal(str(as_number(value)))
    return str(number.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def round_half_up(value):
    return int(Decimal(str(as_number(value))).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
