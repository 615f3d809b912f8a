from typing import Any

from curvekit.exceptions.base import CurvekitError


class AllowanceError(CurvekitError):
    """
    Exception raised by the allowance helpers.
    """


class InsufficientAllowanceForEstimate(AllowanceError):
    """
    A gas estimate was requested for a call whose token allowance has not been granted yet.
    """

    def __init__(
        self,
        coins: tuple[str, ...] = (),
        pool_name: str | None = None,
        method: str | None = None,
    ) -> None:
        self.coins = coins
        self.pool_name = pool_name
        self.method = method
        message = "Token allowance is needed to estimate gas"
        if method is not None:
            message += f" of {method}"
        if pool_name is not None:
            message += f" for {pool_name} pool"
        if coins:
            message += f" ({', '.join(coins)})"
        super().__init__(message=message)

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.coins, self.pool_name, self.method)
