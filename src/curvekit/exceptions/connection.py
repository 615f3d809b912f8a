"""
Connection-related exceptions for the curvekit package.
"""

from curvekit.exceptions.base import CurvekitError


class CurvekitConnectionError(CurvekitError):
    """
    Base exception for connection-related errors.
    """


class ConnectionTimeout(CurvekitConnectionError):
    """
    Raised when a connection attempt times out.
    """

    def __init__(self, resource: str, timeout_seconds: int | None = None) -> None:
        self.resource = resource
        self.timeout_seconds = timeout_seconds

        message = f"Timed out waiting for {resource} connection"
        if timeout_seconds is not None:
            message += f" after {timeout_seconds} seconds"
        message += "."

        super().__init__(message=message)

    def __reduce__(self) -> tuple[type, tuple[str, int | None]]:
        return self.__class__, (self.resource, self.timeout_seconds)


class NoConnectionForChain(CurvekitConnectionError):
    """
    Raised when a chain ID has no registered Web3 instance.
    """

    def __init__(self, chain_id: int) -> None:
        self.chain_id = chain_id
        super().__init__(message=f"Chain ID {chain_id} does not have a registered Web3 instance.")

    def __reduce__(self) -> tuple[type, tuple[int]]:
        return self.__class__, (self.chain_id,)


class TransactionReverted(CurvekitConnectionError):
    """
    Raised when a submitted transaction is mined with a failed status.
    """

    def __init__(self, transaction_hash: str) -> None:
        self.transaction_hash = transaction_hash
        super().__init__(message=f"Transaction {transaction_hash} reverted.")

    def __reduce__(self) -> tuple[type, tuple[str]]:
        return self.__class__, (self.transaction_hash,)


class Web3ConnectionTimeout(ConnectionTimeout):
    """
    Raised when a Web3 connection times out.
    """

    def __init__(self, timeout_seconds: int | None = None) -> None:
        super().__init__(resource="Web3", timeout_seconds=timeout_seconds)

    def __reduce__(self) -> tuple[type, tuple[int | None]]:
        return self.__class__, (self.timeout_seconds,)
