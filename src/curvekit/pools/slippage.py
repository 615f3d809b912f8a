"""
Slippage bounds and realized slippage ("bonus") figures.

Tolerances are percentages: 0.5 means 0.5%. Bounds are computed on `Decimal` values and converted
to integer coin units only at the last step, rounding in the direction that protects the user.
"""

import dataclasses
from collections.abc import Sequence
from decimal import Decimal

from curvekit.math.decimal_math import (
    percentage_difference,
    scale_by_percent,
    to_integer,
    validate_slippage,
)
from curvekit.math.fixed_point import Amount


@dataclasses.dataclass(slots=True, frozen=True)
class SlippageBound:
    expected: Amount
    tolerance: Decimal
    bound: Amount


def min_received(expected: Amount, tolerance: Decimal) -> SlippageBound:
    """
    Lowest acceptable output: `expected * (100 - tolerance) / 100`, rounded down.
    """

    validate_slippage(tolerance)
    bound = to_integer(scale_by_percent(Decimal(expected.value), 100 - tolerance), round_up=False)
    return SlippageBound(
        expected=expected,
        tolerance=tolerance,
        bound=Amount(value=bound, decimals=expected.decimals),
    )


def max_burn(expected: Amount, tolerance: Decimal) -> SlippageBound:
    """
    Highest acceptable input: `expected * (100 + tolerance) / 100`, rounded up.
    """

    validate_slippage(tolerance)
    bound = to_integer(scale_by_percent(Decimal(expected.value), 100 + tolerance), round_up=True)
    return SlippageBound(
        expected=expected,
        tolerance=tolerance,
        bound=Amount(value=bound, decimals=expected.decimals),
    )


def deposit_bonus(expected: Decimal, balanced_expected: Decimal) -> Decimal:
    """
    Percentage by which a deposit's expected LP exceeds that of a reserve-proportional deposit of
    the same total value. Negative values are a loss.
    """

    return percentage_difference(expected, balanced_expected, expected)


def withdraw_bonus(total: Decimal, balanced_total: Decimal) -> Decimal:
    """
    Percentage by which a withdrawal's total value exceeds that of a proportional withdrawal
    burning the same LP amount.
    """

    return percentage_difference(total, balanced_total, max(total, balanced_total))


def balanced_amounts_with_same_value(
    amounts: Sequence[Decimal],
    reserves: Sequence[Decimal],
    prices: Sequence[Decimal],
) -> list[Decimal]:
    """
    Split the total value of `amounts` across the coins in proportion to the reserves' values.
    """

    total_value = sum(
        (amount * price for amount, price in zip(amounts, prices, strict=True)), Decimal(0)
    )
    reserve_values = [reserve * price for reserve, price in zip(reserves, prices, strict=True)]
    total_reserve_value = sum(reserve_values, Decimal(0))
    if total_reserve_value == 0:
        return [total_value / len(amounts) / price for price in prices]
    return [
        reserve_value / total_reserve_value * total_value / price
        for reserve_value, price in zip(reserve_values, prices, strict=True)
    ]


def price_impact(
    amount: Decimal,
    output: Decimal,
    small_amount: Decimal,
    small_output: Decimal,
) -> Decimal:
    """
    Percentage shortfall of the trade's rate against the rate of a small reference trade, never
    negative.
    """

    if amount == 0 or small_amount == 0 or small_output == 0:
        return Decimal(0)
    rate = output / amount
    reference_rate = small_output / small_amount
    impact = (1 - rate / reference_rate) * 100
    return max(impact, Decimal(0)).quantize(Decimal("0.0001"))
