from typing import Any

from curvekit.exceptions.base import CurvekitError


class PoolError(CurvekitError):
    """
    Exception raised inside pool resolution and pool operations.
    """


class UnsupportedOperationForPoolShape(PoolError):
    """
    The requested operation family has no implementation for this pool's archetype.
    """

    def __init__(self, pool_name: str, method: str) -> None:
        self.pool_name = pool_name
        self.method = method
        super().__init__(message=f"{method} method doesn't exist for {pool_name} pool")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_name, self.method)


class CoinIndexOutOfRange(PoolError):
    """
    A coin index is negative, not an integer, or not less than the pool's coin count.
    """

    def __init__(self, pool_name: str, index: object, coin_count: int) -> None:
        self.pool_name = pool_name
        self.index = index
        self.coin_count = coin_count
        super().__init__(
            message=f"Index {index!r} is out of range for {pool_name} pool with {coin_count} coins"
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_name, self.index, self.coin_count)


class UnknownCoin(PoolError):
    """
    A coin address or symbol is not among the pool's coins.
    """

    def __init__(self, pool_name: str, coin: str, underlying: bool = True) -> None:
        self.pool_name = pool_name
        self.coin = coin
        self.underlying = underlying
        kind = "underlying" if underlying else "wrapped"
        super().__init__(message=f"There is no {coin} among {pool_name} pool {kind} coins")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_name, self.coin, self.underlying)


class AmountsLengthMismatch(PoolError):
    """
    The number of amounts provided does not match the number of pool coins.
    """

    def __init__(self, pool_name: str, coin_count: int, amount_count: int) -> None:
        self.pool_name = pool_name
        self.coin_count = coin_count
        self.amount_count = amount_count
        super().__init__(
            message=f"{pool_name} pool has {coin_count} coins (amounts provided for {amount_count})"
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_name, self.coin_count, self.amount_count)


class SameCoinSwap(PoolError):
    """
    The input and output coins of a swap are identical.
    """

    def __init__(self, pool_name: str) -> None:
        self.pool_name = pool_name
        super().__init__(message=f"Input and output coins must be different in {pool_name} pool")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_name,)


class UnknownPoolInterface(PoolError):
    """
    No capability table entry or ABI is available to resolve the contract's function signatures.
    """

    def __init__(self, pool_id: str, contract: str) -> None:
        self.pool_id = pool_id
        self.contract = contract
        super().__init__(message=f"Cannot resolve the {contract} interface for pool {pool_id}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_id, self.contract)


class InvalidPoolDescriptor(PoolError):
    """
    A pool descriptor is internally inconsistent, e.g. a meta pool without a base pool.
    """
