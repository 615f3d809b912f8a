from typing import Any

from curvekit.exceptions.base import CurvekitError


class TransportError(CurvekitError):
    """
    Exception raised by contract-call transports.
    """


class CallReverted(TransportError):
    """
    A read-only call in a batch reverted.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(message=f"Contract call reverted: {reason}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.reason,)


class GasEstimationFailed(TransportError):
    """
    The node could not estimate gas for a transaction, usually because it would revert.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(message=f"Gas estimation failed: {reason}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.reason,)
