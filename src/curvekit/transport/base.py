import abc
import dataclasses
from collections.abc import Sequence
from typing import Any

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from curvekit.functions import encode_function_calldata
from curvekit.types.aliases import ChainId


@dataclasses.dataclass(slots=True, frozen=True)
class ContractCall:
    """
    A read-only contract call, decoded with `return_types`.
    """

    address: ChecksumAddress
    function_prototype: str
    function_arguments: tuple[Any, ...] = ()
    return_types: tuple[str, ...] = ("uint256",)

    @property
    def calldata(self) -> bytes:
        return encode_function_calldata(self.function_prototype, self.function_arguments)


@dataclasses.dataclass(slots=True, frozen=True)
class NativeBalanceCall:
    """
    A read of the chain's native asset balance for an address.
    """

    address: ChecksumAddress


type SnapshotRead = ContractCall | NativeBalanceCall


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class TransactionRequest:
    sender: ChecksumAddress
    to: ChecksumAddress
    data: bytes
    value: int = 0
    gas: int | None = None


class AbstractContractTransport(abc.ABC):
    """
    Contract-call transport. Reads are batched into a single round-trip pinned to one block, so the
    values of a batch are a consistent point-in-time snapshot. Writes are submitted one at a time.

    The transport does not retry; retries belong to the provider underneath it.
    """

    chain_id: ChainId

    @abc.abstractmethod
    async def call_many(self, reads: Sequence[SnapshotRead]) -> list[Any]:
        """
        Execute all reads against the same block and return the decoded results in order.
        """

    async def call(self, read: SnapshotRead) -> Any:
        (result,) = await self.call_many([read])
        return result

    @abc.abstractmethod
    async def estimate_gas(self, transaction: TransactionRequest) -> int: ...

    @abc.abstractmethod
    async def estimate_l1_data_gas(self, transaction: TransactionRequest) -> int:
        """
        Gas charged for posting the transaction data to L1. Only meaningful on rollups.
        """

    @abc.abstractmethod
    async def send_transaction(self, transaction: TransactionRequest) -> HexBytes: ...

    @abc.abstractmethod
    async def wait_for_receipt(self, transaction_hash: HexBytes) -> None:
        """
        Wait until the transaction is mined. Reverted transactions raise the provider's error.
        """
