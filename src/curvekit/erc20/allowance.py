import dataclasses
from collections.abc import Sequence

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from curvekit.constants import ETH_ADDRESS, MAX_UINT256
from curvekit.exceptions.allowance import InsufficientAllowanceForEstimate
from curvekit.exceptions.transport import GasEstimationFailed
from curvekit.functions import encode_function_calldata
from curvekit.gas import GasEstimate, GasEstimator, sum_estimates
from curvekit.logging import logger
from curvekit.transport.base import (
    AbstractContractTransport,
    ContractCall,
    NativeBalanceCall,
    SnapshotRead,
    TransactionRequest,
)


@dataclasses.dataclass(slots=True, frozen=True)
class WalletSnapshot:
    """
    Balances of `owner` and allowances granted to `spender`, read in one batch.
    """

    coins: tuple[ChecksumAddress, ...]
    balances: tuple[int, ...]
    allowances: tuple[int, ...]


def balance_reads(coins: Sequence[ChecksumAddress], owner: ChecksumAddress) -> list[SnapshotRead]:
    return [
        NativeBalanceCall(owner)
        if coin == ETH_ADDRESS
        else ContractCall(coin, "balanceOf(address)", (owner,))
        for coin in coins
    ]


def approve_request(
    sender: ChecksumAddress,
    coin: ChecksumAddress,
    spender: ChecksumAddress,
    amount: int,
) -> TransactionRequest:
    return TransactionRequest(
        sender=sender,
        to=coin,
        data=encode_function_calldata("approve(address,uint256)", (spender, amount)),
    )


class AllowanceManager:
    """
    Reads and sets ERC-20 allowances. The native coin needs no allowance and is always treated as
    approved.

    Some tokens (e.g. USDT) reject changing a non-zero allowance to another non-zero value, so an
    insufficient non-zero allowance is first reset to zero.
    """

    def __init__(
        self,
        transport: AbstractContractTransport,
        gas_estimator: GasEstimator,
        *,
        infinite_approve: bool = True,
    ) -> None:
        self.transport = transport
        self.gas_estimator = gas_estimator
        self.infinite_approve = infinite_approve

    @staticmethod
    def snapshot_reads(
        coins: Sequence[ChecksumAddress],
        owner: ChecksumAddress,
        spender: ChecksumAddress,
    ) -> list[SnapshotRead]:
        reads = balance_reads(coins, owner)
        reads.extend(
            ContractCall(coin, "allowance(address,address)", (owner, spender))
            for coin in coins
            if coin != ETH_ADDRESS
        )
        return reads

    @staticmethod
    def parse_snapshot(coins: Sequence[ChecksumAddress], results: Sequence[int]) -> WalletSnapshot:
        balances = tuple(results[: len(coins)])
        remaining = iter(results[len(coins) :])
        allowances = tuple(
            MAX_UINT256 if coin == ETH_ADDRESS else next(remaining) for coin in coins
        )
        return WalletSnapshot(coins=tuple(coins), balances=balances, allowances=allowances)

    async def snapshot(
        self,
        coins: Sequence[ChecksumAddress],
        owner: ChecksumAddress,
        spender: ChecksumAddress,
    ) -> WalletSnapshot:
        results = await self.transport.call_many(self.snapshot_reads(coins, owner, spender))
        return self.parse_snapshot(coins, results)

    @staticmethod
    def missing(snapshot: WalletSnapshot, amounts: Sequence[int]) -> list[tuple[int, int]]:
        """
        Indices and current allowances of the coins whose allowance is below the amount.
        """

        return [
            (i, allowance)
            for i, (allowance, amount) in enumerate(zip(snapshot.allowances, amounts, strict=True))
            if allowance < amount
        ]

    async def has_allowance(
        self,
        coins: Sequence[ChecksumAddress],
        amounts: Sequence[int],
        owner: ChecksumAddress,
        spender: ChecksumAddress,
        snapshot: WalletSnapshot | None = None,
    ) -> bool:
        if snapshot is None:
            snapshot = await self.snapshot(coins, owner, spender)
        return not self.missing(snapshot, amounts)

    def _approve_amount(self, amount: int) -> int:
        return MAX_UINT256 if self.infinite_approve else amount

    async def _send_and_confirm(self, transaction: TransactionRequest) -> HexBytes:
        estimate = await self.gas_estimator.estimate(transaction)
        transaction = dataclasses.replace(
            transaction, gas=self.gas_estimator.gas_limit(estimate)
        )
        transaction_hash = await self.transport.send_transaction(transaction)
        await self.transport.wait_for_receipt(transaction_hash)
        return transaction_hash

    async def ensure_allowance(
        self,
        coins: Sequence[ChecksumAddress],
        amounts: Sequence[int],
        owner: ChecksumAddress,
        spender: ChecksumAddress,
        snapshot: WalletSnapshot | None = None,
    ) -> list[HexBytes]:
        """
        Approve `spender` for every coin whose allowance is below its amount and wait for each
        approval to be mined. Returns the approval transaction hashes, in submission order.
        """

        if snapshot is None:
            snapshot = await self.snapshot(coins, owner, spender)

        transaction_hashes: list[HexBytes] = []
        for i, current_allowance in self.missing(snapshot, amounts):
            coin = coins[i]
            if current_allowance > 0:
                logger.debug(f"Resetting allowance of {coin} for {spender} before approving")
                transaction_hashes.append(
                    await self._send_and_confirm(approve_request(owner, coin, spender, 0))
                )
            transaction_hashes.append(
                await self._send_and_confirm(
                    approve_request(owner, coin, spender, self._approve_amount(amounts[i]))
                )
            )
        return transaction_hashes

    async def estimate_approve_gas(
        self,
        coins: Sequence[ChecksumAddress],
        amounts: Sequence[int],
        owner: ChecksumAddress,
        spender: ChecksumAddress,
        snapshot: WalletSnapshot | None = None,
    ) -> GasEstimate:
        """
        Total gas of the approvals `ensure_allowance` would submit.

        When an allowance must be reset first, the second approval cannot be estimated until the
        reset is mined. If the node rejects it, the reset estimate is doubled instead. That figure
        is an approximation, not a measurement.
        """

        if snapshot is None:
            snapshot = await self.snapshot(coins, owner, spender)

        estimates: list[GasEstimate] = []
        for i, current_allowance in self.missing(snapshot, amounts):
            coin = coins[i]
            approve = approve_request(owner, coin, spender, self._approve_amount(amounts[i]))
            if current_allowance == 0:
                estimates.append(await self.gas_estimator.estimate(approve))
                continue

            reset_estimate = await self.gas_estimator.estimate(
                approve_request(owner, coin, spender, 0)
            )
            try:
                approve_estimate = await self.gas_estimator.estimate(approve)
            except GasEstimationFailed:
                logger.warning(
                    f"Approval gas for {coin} is an advisory estimate: the reset-then-approve "
                    "sequence was approximated by doubling the reset transaction"
                )
                estimates.append(reset_estimate.doubled())
            else:
                estimates.append(reset_estimate + approve_estimate)

        return sum_estimates(estimates, rollup=self.gas_estimator.is_rollup)

    def require_allowance(
        self,
        snapshot: WalletSnapshot,
        amounts: Sequence[int],
        pool_name: str | None = None,
        method: str | None = None,
    ) -> None:
        """
        Raise if a gas estimate is requested without the allowances the real call needs.
        """

        if missing := self.missing(snapshot, amounts):
            raise InsufficientAllowanceForEstimate(
                tuple(snapshot.coins[i] for i, _ in missing), pool_name, method
            )
