# app/utils/decimal_utils.py
from decimal import Decimal, ROUND_HALF_UP, localcontext

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def as_decimal(value) -> Decimal:
    """Exact Decimal for the value, without rounding."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_decimal(value) -> Decimal:
    value = as_decimal(value)
    with localcontext() as ctx:
        # room for every integer digit plus the two cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def sum_decimals(values) -> Decimal:
    return sum((to_decimal(v) for v in values), ZERO)


def format_brl(value) -> str:
    """'R$ 1234.50' - two decimals, no thousands separator, sign dropped."""
    return f"R$ {abs(to_decimal(value)):.2f}"


def percent_change(current, previous) -> float:
    current = to_decimal(current)
    previous = to_decimal(previous)
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return float((current - previous) / previous * 100)
