"""
Deposit amounts proportional to the pool reserves that fit inside the wallet balances.

For every coin `i` there is a scenario where coin `i` is deposited in full and the others follow
the reserve ratios. The binding scenario is the one asking the least of every coin, which is the
scenario with the smallest `balance[i] / reserve[i]`.
"""

from collections.abc import Sequence
from decimal import Decimal, localcontext

from curvekit.math.decimal_math import DECIMAL_PRECISION, quantize_down
from curvekit.math.fixed_point import format_units, parse_units


def _balanced_vector(reserves: Sequence[Decimal], balances: Sequence[Decimal]) -> list[Decimal]:
    if all(reserve == 0 for reserve in reserves):
        reserves = [Decimal(1)] * len(reserves)

    # Coins without reserves take no part in a balanced deposit
    scenarios = [i for i, reserve in enumerate(reserves) if reserve > 0]
    binding = min(scenarios, key=lambda i: balances[i] / reserves[i])
    return [reserve * balances[binding] / reserves[binding] for reserve in reserves]


def solve_balanced_amounts(
    reserves: Sequence[Decimal],
    wallet_balances: Sequence[Decimal],
    decimals: Sequence[int],
    prices: Sequence[Decimal] | None = None,
) -> list[str]:
    """
    Return the balanced amounts as decimal strings, each truncated to its coin's precision and
    never above the wallet balance.

    With `prices`, the reserves and balances are compared in USD value (crypto pools) and the
    result is converted back to coin units.
    """

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION

        if prices is None:
            amounts = _balanced_vector(reserves, wallet_balances)
        else:
            usd_amounts = _balanced_vector(
                [reserve * price for reserve, price in zip(reserves, prices, strict=True)],
                [balance * price for balance, price in zip(wallet_balances, prices, strict=True)],
            )
            amounts = [
                usd_amount / price if price else Decimal(0)
                for usd_amount, price in zip(usd_amounts, prices, strict=True)
            ]
            if any(reserves):
                # Never more than the pool holds of the coin
                amounts = [
                    min(amount, reserve) for amount, reserve in zip(amounts, reserves, strict=True)
                ]

        return [
            format_units(
                parse_units(min(quantize_down(amount, coin_decimals), balance), coin_decimals),
                coin_decimals,
            )
            for amount, balance, coin_decimals in zip(
                amounts, wallet_balances, decimals, strict=True
            )
        ]
