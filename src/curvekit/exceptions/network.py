from typing import Any

from curvekit.exceptions.base import CurvekitError


class NetworkRestricted(CurvekitError):
    """
    The operation is only available on specific chains.
    """

    def __init__(self, method: str, chain_id: int) -> None:
        self.method = method
        self.chain_id = chain_id
        super().__init__(message=f"{method} is not available on chain {chain_id}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.method, self.chain_id)
