from collections.abc import Sequence
from decimal import ROUND_DOWN, ROUND_UP, Decimal, localcontext

from curvekit.exceptions.math import InvalidSlippage

DECIMAL_PRECISION = 78


def ratios(values: Sequence[Decimal]) -> list[Decimal]:
    """
    Each value as a share of the total. A zero total produces equal shares.
    """

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        total = sum(values, Decimal(0))
        if total == 0:
            return [Decimal(1) / len(values) for _ in values]
        return [value / total for value in values]


def validate_slippage(slippage: Decimal) -> Decimal:
    if not slippage.is_finite() or not (0 <= slippage < 100):  # noqa: PLR2004
        raise InvalidSlippage(slippage)
    return slippage


def scale_by_percent(value: Decimal, percent: Decimal) -> Decimal:
    """
    Return `value * percent / 100`.
    """

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return value * percent / 100


def percentage_difference(value: Decimal, reference: Decimal, denominator: Decimal) -> Decimal:
    """
    Return `(value - reference) / denominator * 100`, or zero for a zero denominator.
    """

    if denominator == 0:
        return Decimal(0)
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return (value - reference) / denominator * 100


def to_integer(value: Decimal, *, round_up: bool) -> int:
    """
    Round a non-negative decimal to an integer, up or down.
    """

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return int(value.to_integral_value(rounding=ROUND_UP if round_up else ROUND_DOWN))


def quantize_down(value: Decimal, decimals: int) -> Decimal:
    """
    Truncate a decimal to `decimals` fractional digits.
    """

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN)
