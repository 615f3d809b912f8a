from typing import Any

from curvekit.exceptions.base import CurvekitError

"""
Exceptions defined here are raised by the pool descriptor registry.
"""


class RegistryError(CurvekitError):
    """
    Exception raised inside registries.
    """


class UnknownPool(RegistryError):
    """
    Raised when a pool id has no registered descriptor.
    """

    def __init__(self, pool_id: str) -> None:
        self.pool_id = pool_id
        super().__init__(message=f"Pool {pool_id} is not registered.")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_id,)


class PoolAlreadyRegistered(RegistryError):
    """
    Raised when a second descriptor is registered under an existing pool id.
    """

    def __init__(self, pool_id: str) -> None:
        self.pool_id = pool_id
        super().__init__(message=f"Pool {pool_id} is already registered.")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.pool_id,)
