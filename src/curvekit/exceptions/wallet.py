from typing import Any

from curvekit.exceptions.base import CurvekitError


class WalletError(CurvekitError):
    """
    Exception raised when a wallet cannot cover a requested action.
    """


class InsufficientBalance(WalletError):
    """
    The wallet balance of a coin is below the amount requested.
    """

    def __init__(
        self,
        coin: str,
        balance: str,
        amount: str,
        pool_name: str | None = None,
        method: str | None = None,
    ) -> None:
        self.coin = coin
        self.balance = balance
        self.amount = amount
        self.pool_name = pool_name
        self.method = method
        message = f"Not enough {coin}. Actual: {balance}, required: {amount}"
        if pool_name is not None and method is not None:
            message = f"{pool_name} pool {method}: {message}"
        super().__init__(message=message)

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (
            self.coin,
            self.balance,
            self.amount,
            self.pool_name,
            self.method,
        )


class MissingSigner(WalletError):
    """
    A transaction was requested from a context without a signer address.
    """

    def __init__(self) -> None:
        super().__init__(message="A signer address is required to submit transactions.")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, ()
