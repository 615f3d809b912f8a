from typing import Any

from curvekit.exceptions.base import CurvekitValueError


class InvalidAmount(CurvekitValueError):
    """
    An amount cannot be represented exactly with the coin's decimal precision, or is not a valid
    non-negative number.
    """

    def __init__(self, amount: object, reason: str) -> None:
        self.amount = amount
        self.reason = reason
        super().__init__(message=f"Invalid amount {amount!r}: {reason}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.amount, self.reason)


class InvalidSlippage(CurvekitValueError):
    """
    Slippage tolerance is outside of [0, 100).
    """

    def __init__(self, slippage: object) -> None:
        self.slippage = slippage
        super().__init__(message=f"Slippage must be within [0, 100), got {slippage!r}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.slippage,)
