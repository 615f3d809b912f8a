"""
Exact conversion between human-readable decimal amounts and on-chain fixed-point integers.
"""

import dataclasses
from decimal import Decimal, InvalidOperation, localcontext
from typing import Self

from curvekit.exceptions.math import InvalidAmount
from curvekit.types.aliases import AmountLike

# Enough digits to hold any uint256 together with 18 fractional places
FIXED_POINT_PRECISION = 100


def to_decimal(amount: AmountLike) -> Decimal:
    """
    Convert a caller-supplied amount to a `Decimal` without passing through binary floating point.

    Floats are converted from their shortest `repr`, so `0.1` becomes `Decimal("0.1")`.
    """

    if isinstance(amount, bool):
        raise InvalidAmount(amount, "booleans are not amounts")

    match amount:
        case Decimal():
            value = amount
        case int():
            value = Decimal(amount)
        case float():
            value = Decimal(repr(amount))
        case str():
            try:
                value = Decimal(amount.strip())
            except InvalidOperation:
                raise InvalidAmount(amount, "not a number") from None
        case _:
            raise InvalidAmount(amount, f"unsupported type {type(amount).__name__}")

    if not value.is_finite():
        raise InvalidAmount(amount, "not a finite number")
    if value < 0:
        raise InvalidAmount(amount, "must not be negative")
    return value


def parse_units(amount: AmountLike, decimals: int) -> int:
    """
    Convert a human-readable amount to its integer representation with `decimals` fractional
    digits, e.g. parse_units("1.5", 6) == 1_500_000.

    Raises `InvalidAmount` if the amount has more fractional digits than the coin supports.
    """

    value = to_decimal(amount)
    with localcontext() as ctx:
        ctx.prec = FIXED_POINT_PRECISION
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise InvalidAmount(amount, f"more than {decimals} decimal places")
        return int(scaled)


def format_units(value: int, decimals: int) -> str:
    """
    Convert an integer amount with `decimals` fractional digits to an exact decimal string.

    Trailing fractional zeros are removed and exponent notation is never produced.
    """

    if value < 0:
        raise InvalidAmount(value, "must not be negative")

    whole, fraction = divmod(value, 10**decimals)
    if decimals == 0 or fraction == 0:
        return str(whole)
    return f"{whole}.{str(fraction).rjust(decimals, '0').rstrip('0')}"


def trim_decimal_string(amount: str) -> str:
    """
    Normalize a decimal string the way `format_units` renders it: no trailing fractional zeros,
    no superfluous leading zeros, no exponent.
    """

    value = to_decimal(amount)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


@dataclasses.dataclass(slots=True, frozen=True)
class Amount:
    """
    A coin amount held as the on-chain integer, with its decimal precision.
    """

    value: int
    decimals: int

    @classmethod
    def from_human(cls, amount: AmountLike, decimals: int) -> Self:
        return cls(value=parse_units(amount, decimals), decimals=decimals)

    @property
    def human(self) -> str:
        return format_units(self.value, self.decimals)

    @property
    def decimal(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = FIXED_POINT_PRECISION
            return Decimal(self.value).scaleb(-self.decimals)

    def __str__(self) -> str:
        return self.human
