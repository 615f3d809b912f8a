from collections.abc import Sequence
from typing import Any, Self

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import AsyncBaseProvider, AsyncWeb3
from web3.exceptions import ContractLogicError
from web3.types import TxParams

from curvekit.connection import AsyncConnectionManager
from curvekit.constants import OP_STACK_GAS_PRICE_ORACLE
from curvekit.exceptions.connection import TransactionReverted
from curvekit.exceptions.transport import CallReverted, GasEstimationFailed
from curvekit.functions import decode_function_result
from curvekit.logging import logger
from curvekit.transport.base import (
    AbstractContractTransport,
    ContractCall,
    NativeBalanceCall,
    SnapshotRead,
    TransactionRequest,
)
from curvekit.types.aliases import ChainId


class Web3Transport(AbstractContractTransport):
    """
    Transport backed by an `AsyncWeb3` instance.

    Transactions are signed locally when a private key is supplied, otherwise they are sent with
    `eth_sendTransaction` and signed by the node.
    """

    def __init__(
        self,
        w3: AsyncWeb3[AsyncBaseProvider],
        chain_id: ChainId,
        *,
        private_key: str | None = None,
        gas_price_oracle: ChecksumAddress = OP_STACK_GAS_PRICE_ORACLE,
    ) -> None:
        self.w3 = w3
        self.chain_id = chain_id
        self._private_key = private_key
        self._gas_price_oracle = gas_price_oracle

    @classmethod
    def from_connection_manager(
        cls,
        connection_manager: AsyncConnectionManager,
        chain_id: ChainId,
        *,
        private_key: str | None = None,
    ) -> Self:
        return cls(
            connection_manager.get_web3(chain_id),
            chain_id,
            private_key=private_key,
        )

    async def call_many(self, reads: Sequence[SnapshotRead]) -> list[Any]:
        if not reads:
            return []

        block_number = await self.w3.eth.block_number
        try:
            responses = await self._execute_batch(reads, block_number)
        except ContractLogicError as exc:
            raise CallReverted(str(exc)) from exc

        logger.debug(f"Read {len(reads)} values in one batch at block {block_number}")

        results: list[Any] = []
        for read, response in zip(reads, responses, strict=True):
            match read:
                case ContractCall():
                    results.append(decode_function_result(read.return_types, response))
                case NativeBalanceCall():
                    results.append(int(response))
        return results

    async def _execute_batch(self, reads: Sequence[SnapshotRead], block_number: int) -> list[Any]:
        async with self.w3.batch_requests() as batch:
            for read in reads:
                match read:
                    case ContractCall():
                        batch.add(
                            self.w3.eth.call(
                                transaction=TxParams(to=read.address, data=read.calldata),
                                block_identifier=block_number,
                            )
                        )
                    case NativeBalanceCall():
                        batch.add(
                            self.w3.eth.get_balance(read.address, block_identifier=block_number)
                        )
            return list(await batch.async_execute())

    def _tx_params(self, transaction: TransactionRequest) -> TxParams:
        params = TxParams(
            {
                "from": transaction.sender,
                "to": transaction.to,
                "data": HexBytes(transaction.data),
                "value": transaction.value,
                "chainId": self.chain_id,
            }
        )
        if transaction.gas is not None:
            params["gas"] = transaction.gas
        return params

    async def estimate_gas(self, transaction: TransactionRequest) -> int:
        try:
            return await self.w3.eth.estimate_gas(self._tx_params(transaction))
        except ContractLogicError as exc:
            raise GasEstimationFailed(str(exc)) from exc

    async def estimate_l1_data_gas(self, transaction: TransactionRequest) -> int:
        (l1_gas_used,) = await self.call_many(
            [
                ContractCall(
                    address=self._gas_price_oracle,
                    function_prototype="getL1GasUsed(bytes)",
                    function_arguments=(transaction.data,),
                )
            ]
        )
        return int(l1_gas_used)

    async def send_transaction(self, transaction: TransactionRequest) -> HexBytes:
        params = self._tx_params(transaction)

        if self._private_key is None:
            transaction_hash = await self.w3.eth.send_transaction(params)
        else:
            params["nonce"] = await self.w3.eth.get_transaction_count(
                transaction.sender, "pending"
            )
            params["gasPrice"] = await self.w3.eth.gas_price
            if "gas" not in params:
                params["gas"] = await self.w3.eth.estimate_gas(params)
            signed = self.w3.eth.account.sign_transaction(params, self._private_key)
            transaction_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)

        logger.info(f"Sent transaction {HexBytes(transaction_hash).to_0x_hex()}")
        return HexBytes(transaction_hash)

    async def wait_for_receipt(self, transaction_hash: HexBytes) -> None:
        receipt = await self.w3.eth.wait_for_transaction_receipt(transaction_hash)
        if receipt["status"] == 0:
            raise TransactionReverted(transaction_hash.to_0x_hex())
