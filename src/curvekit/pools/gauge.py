from typing import TYPE_CHECKING

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from curvekit.constants import (
    CHILD_GAUGE_FACTORIES,
    CRV_MINTER_ADDRESS,
    CRV_MINTER_CHAIN_ID,
    LP_TOKEN_DECIMALS,
    UNSTAKE_GAS_MULTIPLIER,
    ZERO_ADDRESS,
)
from curvekit.exceptions.network import NetworkRestricted
from curvekit.exceptions.pool import UnsupportedOperationForPoolShape
from curvekit.exceptions.wallet import InsufficientBalance
from curvekit.functions import encode_function_calldata
from curvekit.math.fixed_point import format_units, parse_units
from curvekit.pools.operations import (
    ApprovalRequirement,
    PreparedTransaction,
    estimate_prepared,
    submit_prepared,
)
from curvekit.transport.base import ContractCall, TransactionRequest
from curvekit.types.aliases import AmountLike, GasAmount

if TYPE_CHECKING:
    from curvekit.pools.pool import CurvePool


class GaugeOperations:
    """
    Staking LP tokens in the pool's liquidity gauge and claiming CRV emissions.
    """

    def __init__(self, pool: "CurvePool") -> None:
        self.pool = pool

    @property
    def address(self) -> ChecksumAddress:
        return self.pool.descriptor.gauge

    def _require_gauge(self, method: str) -> ChecksumAddress:
        if self.address == ZERO_ADDRESS:
            raise UnsupportedOperationForPoolShape(self.pool.name, method)
        return self.address

    async def staked_balance(self, address: str | None = None) -> str:
        gauge = self._require_gauge("staked_balance")
        balance = await self.pool.context.transport.call(
            ContractCall(gauge, "balanceOf(address)", (self.pool._owner(address),))
        )
        return format_units(balance, LP_TOKEN_DECIMALS)

    async def stake_is_approved(self, lp_amount: AmountLike) -> bool:
        gauge = self._require_gauge("stake_is_approved")
        return await self.pool.allowances.has_allowance(
            (self.pool.lp_token,),
            (parse_units(lp_amount, LP_TOKEN_DECIMALS),),
            self.pool.context.require_signer(),
            gauge,
        )

    async def stake_approve(self, lp_amount: AmountLike) -> list[HexBytes]:
        gauge = self._require_gauge("stake_approve")
        return await self.pool.allowances.ensure_allowance(
            (self.pool.lp_token,),
            (parse_units(lp_amount, LP_TOKEN_DECIMALS),),
            self.pool.context.require_signer(),
            gauge,
        )

    async def estimate_stake_approve(self, lp_amount: AmountLike) -> GasAmount:
        gauge = self._require_gauge("stake_approve")
        estimate = await self.pool.allowances.estimate_approve_gas(
            (self.pool.lp_token,),
            (parse_units(lp_amount, LP_TOKEN_DECIMALS),),
            self.pool.context.require_signer(),
            gauge,
        )
        return estimate.value

    async def _prepare_stake(self, lp_amount: AmountLike) -> PreparedTransaction:
        gauge = self._require_gauge("stake")
        sender = self.pool.context.require_signer()
        parsed = parse_units(lp_amount, LP_TOKEN_DECIMALS)

        snapshot = await self.pool.allowances.snapshot((self.pool.lp_token,), sender, gauge)
        (balance,) = snapshot.balances
        if balance < parsed:
            raise InsufficientBalance(
                f"{self.pool.name} LP token",
                format_units(balance, LP_TOKEN_DECIMALS),
                format_units(parsed, LP_TOKEN_DECIMALS),
                self.pool.name,
                "stake",
            )

        return PreparedTransaction(
            method="stake",
            transaction=TransactionRequest(
                sender=sender,
                to=gauge,
                data=encode_function_calldata("deposit(uint256)", (parsed,)),
            ),
            approval=ApprovalRequirement(spender=gauge, snapshot=snapshot, amounts=(parsed,)),
        )

    async def stake(self, lp_amount: AmountLike) -> HexBytes:
        return await submit_prepared(self.pool, await self._prepare_stake(lp_amount))

    async def estimate_stake(self, lp_amount: AmountLike) -> GasAmount:
        return await estimate_prepared(self.pool, await self._prepare_stake(lp_amount))

    async def _prepare_unstake(self, lp_amount: AmountLike) -> PreparedTransaction:
        gauge = self._require_gauge("unstake")
        sender = self.pool.context.require_signer()
        parsed = parse_units(lp_amount, LP_TOKEN_DECIMALS)

        staked = await self.pool.context.transport.call(
            ContractCall(gauge, "balanceOf(address)", (sender,))
        )
        if staked < parsed:
            raise InsufficientBalance(
                f"{self.pool.name} gauge",
                format_units(staked, LP_TOKEN_DECIMALS),
                format_units(parsed, LP_TOKEN_DECIMALS),
                self.pool.name,
                "unstake",
            )

        return PreparedTransaction(
            method="unstake",
            transaction=TransactionRequest(
                sender=sender,
                to=gauge,
                data=encode_function_calldata("withdraw(uint256)", (parsed,)),
            ),
            gas_multiplier=UNSTAKE_GAS_MULTIPLIER,
        )

    async def unstake(self, lp_amount: AmountLike) -> HexBytes:
        return await submit_prepared(self.pool, await self._prepare_unstake(lp_amount))

    async def estimate_unstake(self, lp_amount: AmountLike) -> GasAmount:
        return await estimate_prepared(self.pool, await self._prepare_unstake(lp_amount))

    def _prepare_claim_crv(self) -> PreparedTransaction:
        gauge = self._require_gauge("claim_crv")
        sender = self.pool.context.require_signer()

        chain_id = self.pool.context.chain_id
        if chain_id == CRV_MINTER_CHAIN_ID:
            minter = CRV_MINTER_ADDRESS
        elif chain_id in CHILD_GAUGE_FACTORIES:
            minter = CHILD_GAUGE_FACTORIES[chain_id]
        else:
            raise NetworkRestricted("claim_crv", chain_id)

        return PreparedTransaction(
            method="claim_crv",
            transaction=TransactionRequest(
                sender=sender,
                to=minter,
                data=encode_function_calldata("mint(address)", (gauge,)),
            ),
        )

    async def claim_crv(self) -> HexBytes:
        return await submit_prepared(self.pool, self._prepare_claim_crv())

    async def estimate_claim_crv(self) -> GasAmount:
        return await estimate_prepared(self.pool, self._prepare_claim_crv())
