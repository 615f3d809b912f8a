"""
Operation families of a pool.

Each operation holds the variant selected for its family. The estimate and execute forms of an
operation share one `_prepare` step, so they validate inputs identically and fail under the same
conditions. All checks that can be made client-side (amount counts, coin indices, balances) run
before a transaction is built.
"""

import dataclasses
from collections.abc import Sequence
from decimal import Decimal
from typing import TYPE_CHECKING

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from curvekit.constants import ETH_ADDRESS, LP_TOKEN_DECIMALS
from curvekit.erc20.allowance import WalletSnapshot, balance_reads
from curvekit.exceptions.math import InvalidAmount, InvalidSlippage
from curvekit.exceptions.pool import (
    AmountsLengthMismatch,
    SameCoinSwap,
    UnsupportedOperationForPoolShape,
)
from curvekit.exceptions.wallet import InsufficientBalance
from curvekit.functions import encode_function_calldata
from curvekit.gas import sum_estimates
from curvekit.logging import logger
from curvekit.math.decimal_math import quantize_down, validate_slippage
from curvekit.math.fixed_point import (
    Amount,
    format_units,
    parse_units,
    to_decimal,
    trim_decimal_string,
)
from curvekit.pools.balanced_amounts import solve_balanced_amounts
from curvekit.pools.slippage import (
    balanced_amounts_with_same_value,
    deposit_bonus,
    max_burn,
    min_received,
    price_impact,
    withdraw_bonus,
)
from curvekit.pools.variants import CallTarget, OperationVariant
from curvekit.transport.base import TransactionRequest
from curvekit.types.aliases import AmountLike, GasAmount
from curvekit.worker import run_delegated

if TYPE_CHECKING:
    from curvekit.pools.pool import CurvePool

# The reference trade for price impact is this fraction of the requested amount
PRICE_IMPACT_REFERENCE_DIVISOR = 1000


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class ApprovalRequirement:
    """
    Allowances a transaction needs, with the wallet snapshot they were checked against.
    """

    spender: ChecksumAddress
    snapshot: WalletSnapshot
    amounts: tuple[int, ...]

    @property
    def coins(self) -> tuple[ChecksumAddress, ...]:
        return self.snapshot.coins


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class PreparedTransaction:
    method: str
    transaction: TransactionRequest
    approval: ApprovalRequirement | None = None
    gas_multiplier: Decimal | None = None


async def estimate_prepared(pool: "CurvePool", prepared: PreparedTransaction) -> GasAmount:
    """
    Raw gas estimate of a prepared transaction. The allowances must already be in place.
    """

    if prepared.approval is not None:
        pool.allowances.require_allowance(
            prepared.approval.snapshot, prepared.approval.amounts, pool.name, prepared.method
        )
    estimate = await pool.gas_estimator.estimate(prepared.transaction)
    return estimate.value


async def submit_prepared(pool: "CurvePool", prepared: PreparedTransaction) -> HexBytes:
    """
    Grant any missing allowance, wait for the approvals to be mined, then submit the transaction
    with a multiplied gas limit.
    """

    if (approval := prepared.approval) is not None:
        await pool.allowances.ensure_allowance(
            approval.coins,
            approval.amounts,
            prepared.transaction.sender,
            approval.spender,
            approval.snapshot,
        )

    estimate = await pool.gas_estimator.estimate(prepared.transaction)
    transaction = dataclasses.replace(
        prepared.transaction,
        gas=pool.gas_estimator.gas_limit(estimate, prepared.gas_multiplier),
    )
    transaction_hash = await pool.context.transport.send_transaction(transaction)
    logger.info(
        f"Submitted {prepared.method} to {pool.name} pool (gas limit {transaction.gas}): "
        f"{transaction_hash.to_0x_hex()}"
    )
    return transaction_hash


class PoolOperation:
    """
    Base for the operation families. Subclasses implement `_prepare` and the family's read-only
    helpers.
    """

    def __init__(self, pool: "CurvePool", variant: OperationVariant) -> None:
        self.pool = pool
        self.variant = variant

    @property
    def name(self) -> str:
        return self.variant.family.value

    @property
    def underlying(self) -> bool:
        return not self.variant.family.wrapped

    @property
    def coins(self) -> tuple[ChecksumAddress, ...]:
        return self.pool.coins(underlying=self.underlying)

    @property
    def decimals(self) -> tuple[int, ...]:
        return self.pool.decimals(underlying=self.underlying)

    @property
    def spender(self) -> ChecksumAddress:
        return self.pool.contract_address(self.variant.target)

    def require_supported(self, method: str | None = None) -> None:
        if not self.variant.supported:
            raise UnsupportedOperationForPoolShape(self.pool.name, method or self.name)

    def _parse_amounts(self, amounts: Sequence[AmountLike]) -> list[int]:
        if len(amounts) != len(self.coins):
            raise AmountsLengthMismatch(self.pool.name, len(self.coins), len(amounts))
        return [
            parse_units(amount, decimals)
            for amount, decimals in zip(amounts, self.decimals, strict=True)
        ]

    def _tolerance(self, slippage: AmountLike | None, *, estimate: bool) -> Decimal:
        if slippage is None:
            settings = self.pool.context.settings
            return settings.estimate_slippage if estimate else settings.default_slippage
        try:
            return validate_slippage(to_decimal(slippage))
        except InvalidAmount:
            raise InvalidSlippage(slippage) from None

    def _native_value(self, amounts: Sequence[int]) -> int:
        return sum(
            amount
            for coin, amount in zip(self.coins, amounts, strict=True)
            if coin == ETH_ADDRESS
        )

    def _check_balances(
        self,
        snapshot: WalletSnapshot,
        amounts: Sequence[int],
        labels: Sequence[str],
        decimals: Sequence[int],
    ) -> None:
        for balance, amount, label, coin_decimals in zip(
            snapshot.balances, amounts, labels, decimals, strict=True
        ):
            if balance < amount:
                raise InsufficientBalance(
                    label,
                    format_units(balance, coin_decimals),
                    format_units(amount, coin_decimals),
                    self.pool.name,
                    self.name,
                )

    def _transaction(
        self,
        sender: ChecksumAddress,
        core_arguments: tuple[object, ...],
        value: int = 0,
    ) -> TransactionRequest:
        arguments = self.variant.arguments(self.pool.address, core_arguments)
        signature = self.pool.contract_interface(self.variant.target).signature(
            self.variant.function, len(arguments)
        )
        if signature is None:
            raise UnsupportedOperationForPoolShape(self.pool.name, self.name)
        return TransactionRequest(
            sender=sender,
            to=self.spender,
            data=encode_function_calldata(signature, arguments),
            value=value,
        )

    def _prepared(
        self,
        transaction: TransactionRequest,
        approval: ApprovalRequirement | None,
    ) -> PreparedTransaction:
        return PreparedTransaction(
            method=self.name,
            transaction=transaction,
            approval=approval,
            gas_multiplier=self.variant.gas_multiplier,
        )

    def _value(self, amounts: Sequence[int], prices: Sequence[Decimal]) -> Decimal:
        return sum(
            (
                Amount(amount, decimals).decimal * price
                for amount, decimals, price in zip(amounts, self.decimals, prices, strict=True)
            ),
            Decimal(0),
        )

    async def _is_approved(self, coins: Sequence[ChecksumAddress], amounts: Sequence[int]) -> bool:
        owner = self.pool.context.require_signer()
        return await self.pool.allowances.has_allowance(coins, amounts, owner, self.spender)

    async def _approve(
        self, coins: Sequence[ChecksumAddress], amounts: Sequence[int]
    ) -> list[HexBytes]:
        owner = self.pool.context.require_signer()
        return await self.pool.allowances.ensure_allowance(coins, amounts, owner, self.spender)

    async def _estimate_approve(
        self, coins: Sequence[ChecksumAddress], amounts: Sequence[int]
    ) -> GasAmount:
        owner = self.pool.context.require_signer()
        estimate = await self.pool.allowances.estimate_approve_gas(
            coins, amounts, owner, self.spender
        )
        return estimate.value


class DepositOperation(PoolOperation):
    async def expected(self, amounts: Sequence[AmountLike]) -> str:
        self.require_supported(f"{self.name}_expected")
        lp_amount = await self.pool.calc_token_amount(
            self._parse_amounts(amounts), is_deposit=True, underlying=self.underlying
        )
        return format_units(lp_amount, LP_TOKEN_DECIMALS)

    async def balanced_amounts(self) -> list[str]:
        """
        Amounts proportional to the pool reserves that fit inside the signer's wallet balances.
        """

        self.require_supported(f"{self.name}_balanced_amounts")
        owner = self.pool.context.require_signer()
        reserves, wallet_balances = await self.pool.read_with_reserves(
            balance_reads(self.coins, owner)
        )
        pool_balances = self.pool.reserve_amounts(reserves, underlying=self.underlying)
        prices = (
            await self.pool.usd_prices(underlying=self.underlying)
            if self.pool.flags.is_crypto
            else None
        )
        return await run_delegated(
            solve_balanced_amounts,
            [Amount(b, d).decimal for b, d in zip(pool_balances, self.decimals, strict=True)],
            [Amount(b, d).decimal for b, d in zip(wallet_balances, self.decimals, strict=True)],
            self.decimals,
            prices,
            timeout=self.pool.context.settings.delegated_timeout,
        )

    async def bonus(self, amounts: Sequence[AmountLike]) -> str:
        """
        Percentage gained (or lost, when negative) against a balanced deposit of equal value.
        """

        self.require_supported(f"{self.name}_bonus")
        parsed = self._parse_amounts(amounts)
        reserves = await self.pool.reserves()
        prices = await self.pool.value_prices(underlying=self.underlying)
        balanced = balanced_amounts_with_same_value(
            [Amount(a, d).decimal for a, d in zip(parsed, self.decimals, strict=True)],
            [
                Amount(r, d).decimal
                for r, d in zip(
                    self.pool.reserve_amounts(reserves, underlying=self.underlying),
                    self.decimals,
                    strict=True,
                )
            ],
            prices,
        )
        balanced_parsed = [
            parse_units(quantize_down(amount, d), d)
            for amount, d in zip(balanced, self.decimals, strict=True)
        ]

        expected = await self.pool.calc_token_amount(
            parsed, is_deposit=True, underlying=self.underlying
        )
        balanced_expected = await self.pool.calc_token_amount(
            balanced_parsed, is_deposit=True, underlying=self.underlying
        )
        return format(deposit_bonus(Decimal(expected), Decimal(balanced_expected)), "f")

    async def is_approved(self, amounts: Sequence[AmountLike]) -> bool:
        self.require_supported(f"{self.name}_is_approved")
        return await self._is_approved(self.coins, self._parse_amounts(amounts))

    async def approve(self, amounts: Sequence[AmountLike]) -> list[HexBytes]:
        self.require_supported(f"{self.name}_approve")
        return await self._approve(self.coins, self._parse_amounts(amounts))

    async def estimate_approve(self, amounts: Sequence[AmountLike]) -> GasAmount:
        self.require_supported(f"{self.name}_approve")
        return await self._estimate_approve(self.coins, self._parse_amounts(amounts))

    async def _prepare(
        self, amounts: Sequence[AmountLike], tolerance: Decimal
    ) -> PreparedTransaction:
        self.require_supported()
        sender = self.pool.context.require_signer()
        parsed = self._parse_amounts(amounts)

        snapshot = await self.pool.allowances.snapshot(self.coins, sender, self.spender)
        self._check_balances(
            snapshot, parsed, self.pool.coin_labels(underlying=self.underlying), self.decimals
        )

        expected = await self.pool.calc_token_amount(
            parsed, is_deposit=True, underlying=self.underlying
        )
        min_mint = min_received(Amount(expected, LP_TOKEN_DECIMALS), tolerance).bound
        return self._prepared(
            self._transaction(sender, (parsed, min_mint.value), value=self._native_value(parsed)),
            ApprovalRequirement(spender=self.spender, snapshot=snapshot, amounts=tuple(parsed)),
        )

    async def execute(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> HexBytes:
        prepared = await self._prepare(amounts, self._tolerance(slippage, estimate=False))
        return await submit_prepared(self.pool, prepared)

    async def estimate(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> GasAmount:
        prepared = await self._prepare(amounts, self._tolerance(slippage, estimate=True))
        return await estimate_prepared(self.pool, prepared)


class LiquidityRemoval(PoolOperation):
    """
    Operations that burn LP tokens. The pool burns the caller's LP directly, so an LP allowance is
    only needed when the call goes through a zap.
    """

    @property
    def approval_needed(self) -> bool:
        return self.variant.target is CallTarget.ZAP

    def _lp_approval(
        self, snapshot: WalletSnapshot, lp_amount: int
    ) -> ApprovalRequirement | None:
        if not self.approval_needed:
            return None
        return ApprovalRequirement(spender=self.spender, snapshot=snapshot, amounts=(lp_amount,))

    async def _lp_snapshot(self, sender: ChecksumAddress, lp_amount: int) -> WalletSnapshot:
        snapshot = await self.pool.allowances.snapshot((self.pool.lp_token,), sender, self.spender)
        self._check_balances(
            snapshot, (lp_amount,), (f"{self.pool.name} LP token",), (LP_TOKEN_DECIMALS,)
        )
        return snapshot

    async def _lp_is_approved(self, lp_amount: int) -> bool:
        if not self.approval_needed:
            return True
        return await self._is_approved((self.pool.lp_token,), (lp_amount,))

    async def _lp_approve(self, lp_amount: int) -> list[HexBytes]:
        if not self.approval_needed:
            return []
        return await self._approve((self.pool.lp_token,), (lp_amount,))

    async def _lp_estimate_approve(self, lp_amount: int) -> GasAmount:
        if not self.approval_needed:
            return sum_estimates([], rollup=self.pool.gas_estimator.is_rollup).value
        return await self._estimate_approve((self.pool.lp_token,), (lp_amount,))


class LpAmountApprovals(LiquidityRemoval):
    """
    Approval methods for the families whose LP amount is given by the caller.
    """

    async def is_approved(self, lp_amount: AmountLike) -> bool:
        self.require_supported(f"{self.name}_is_approved")
        return await self._lp_is_approved(parse_units(lp_amount, LP_TOKEN_DECIMALS))

    async def approve(self, lp_amount: AmountLike) -> list[HexBytes]:
        self.require_supported(f"{self.name}_approve")
        return await self._lp_approve(parse_units(lp_amount, LP_TOKEN_DECIMALS))

    async def estimate_approve(self, lp_amount: AmountLike) -> GasAmount:
        self.require_supported(f"{self.name}_approve")
        return await self._lp_estimate_approve(parse_units(lp_amount, LP_TOKEN_DECIMALS))


class WithdrawOperation(LpAmountApprovals):
    async def expected(self, lp_amount: AmountLike) -> list[str]:
        self.require_supported(f"{self.name}_expected")
        amounts = await self.pool.withdraw_amounts(
            parse_units(lp_amount, LP_TOKEN_DECIMALS), underlying=self.underlying
        )
        return [format_units(a, d) for a, d in zip(amounts, self.decimals, strict=True)]

    async def _prepare(self, lp_amount: AmountLike, tolerance: Decimal) -> PreparedTransaction:
        self.require_supported()
        sender = self.pool.context.require_signer()
        parsed = parse_units(lp_amount, LP_TOKEN_DECIMALS)
        snapshot = await self._lp_snapshot(sender, parsed)

        expected = await self.pool.withdraw_amounts(parsed, underlying=self.underlying)
        minimums = [
            min_received(Amount(amount, decimals), tolerance).bound.value
            for amount, decimals in zip(expected, self.decimals, strict=True)
        ]
        return self._prepared(
            self._transaction(sender, (parsed, minimums)),
            self._lp_approval(snapshot, parsed),
        )

    async def execute(self, lp_amount: AmountLike, slippage: AmountLike | None = None) -> HexBytes:
        prepared = await self._prepare(lp_amount, self._tolerance(slippage, estimate=False))
        return await submit_prepared(self.pool, prepared)

    async def estimate(
        self, lp_amount: AmountLike, slippage: AmountLike | None = None
    ) -> GasAmount:
        prepared = await self._prepare(lp_amount, self._tolerance(slippage, estimate=True))
        return await estimate_prepared(self.pool, prepared)


class WithdrawImbalanceOperation(LiquidityRemoval):
    async def _expected_burn(self, parsed: Sequence[int]) -> int:
        return await self.pool.calc_token_amount(
            parsed, is_deposit=False, underlying=self.underlying
        )

    async def _max_burn(self, parsed: Sequence[int], tolerance: Decimal) -> int:
        expected = await self._expected_burn(parsed)
        return max_burn(Amount(expected, LP_TOKEN_DECIMALS), tolerance).bound.value

    async def expected(self, amounts: Sequence[AmountLike]) -> str:
        self.require_supported(f"{self.name}_expected")
        return format_units(
            await self._expected_burn(self._parse_amounts(amounts)), LP_TOKEN_DECIMALS
        )

    async def bonus(self, amounts: Sequence[AmountLike]) -> str:
        """
        Percentage gained (or lost, when negative) against a proportional withdrawal burning the
        same LP amount.
        """

        self.require_supported(f"{self.name}_bonus")
        parsed = self._parse_amounts(amounts)
        prices = await self.pool.value_prices(underlying=self.underlying)
        lp_amount = await self._expected_burn(parsed)
        balanced = await self.pool.withdraw_amounts(lp_amount, underlying=self.underlying)
        return format(
            withdraw_bonus(self._value(parsed, prices), self._value(balanced, prices)), "f"
        )

    async def is_approved(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> bool:
        self.require_supported(f"{self.name}_is_approved")
        if not self.approval_needed:
            return True
        tolerance = self._tolerance(slippage, estimate=False)
        return await self._lp_is_approved(
            await self._max_burn(self._parse_amounts(amounts), tolerance)
        )

    async def approve(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> list[HexBytes]:
        self.require_supported(f"{self.name}_approve")
        if not self.approval_needed:
            return []
        tolerance = self._tolerance(slippage, estimate=False)
        return await self._lp_approve(
            await self._max_burn(self._parse_amounts(amounts), tolerance)
        )

    async def estimate_approve(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> GasAmount:
        self.require_supported(f"{self.name}_approve")
        tolerance = self._tolerance(slippage, estimate=True)
        return await self._lp_estimate_approve(
            await self._max_burn(self._parse_amounts(amounts), tolerance)
        )

    async def _prepare(
        self, amounts: Sequence[AmountLike], tolerance: Decimal
    ) -> PreparedTransaction:
        self.require_supported()
        sender = self.pool.context.require_signer()
        parsed = self._parse_amounts(amounts)

        burn_limit = await self._max_burn(parsed, tolerance)
        snapshot = await self._lp_snapshot(sender, burn_limit)
        return self._prepared(
            self._transaction(sender, (parsed, burn_limit)),
            self._lp_approval(snapshot, burn_limit),
        )

    async def execute(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> HexBytes:
        prepared = await self._prepare(amounts, self._tolerance(slippage, estimate=False))
        return await submit_prepared(self.pool, prepared)

    async def estimate(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> GasAmount:
        prepared = await self._prepare(amounts, self._tolerance(slippage, estimate=True))
        return await estimate_prepared(self.pool, prepared)


class WithdrawOneCoinOperation(LpAmountApprovals):
    async def _expected(self, lp_amount: int, i: int) -> int:
        return await self.pool.calc_withdraw_one_coin(
            self.variant, lp_amount, i, underlying=self.underlying
        )

    async def expected(self, lp_amount: AmountLike, coin: int | str) -> str:
        self.require_supported(f"{self.name}_expected")
        i = self.pool.coin_index(coin, underlying=self.underlying)
        amount = await self._expected(parse_units(lp_amount, LP_TOKEN_DECIMALS), i)
        return format_units(amount, self.decimals[i])

    async def bonus(self, lp_amount: AmountLike, coin: int | str) -> str:
        self.require_supported(f"{self.name}_bonus")
        i = self.pool.coin_index(coin, underlying=self.underlying)
        parsed = parse_units(lp_amount, LP_TOKEN_DECIMALS)
        prices = await self.pool.value_prices(underlying=self.underlying)

        value = Amount(await self._expected(parsed, i), self.decimals[i]).decimal * prices[i]
        balanced = await self.pool.withdraw_amounts(parsed, underlying=self.underlying)
        return format(withdraw_bonus(value, self._value(balanced, prices)), "f")

    async def _prepare(
        self, lp_amount: AmountLike, coin: int | str, tolerance: Decimal
    ) -> PreparedTransaction:
        self.require_supported()
        sender = self.pool.context.require_signer()
        i = self.pool.coin_index(coin, underlying=self.underlying)
        parsed = parse_units(lp_amount, LP_TOKEN_DECIMALS)
        snapshot = await self._lp_snapshot(sender, parsed)

        expected = await self._expected(parsed, i)
        minimum = min_received(Amount(expected, self.decimals[i]), tolerance).bound
        return self._prepared(
            self._transaction(sender, (parsed, i, minimum.value)),
            self._lp_approval(snapshot, parsed),
        )

    async def execute(
        self, lp_amount: AmountLike, coin: int | str, slippage: AmountLike | None = None
    ) -> HexBytes:
        prepared = await self._prepare(lp_amount, coin, self._tolerance(slippage, estimate=False))
        return await submit_prepared(self.pool, prepared)

    async def estimate(
        self, lp_amount: AmountLike, coin: int | str, slippage: AmountLike | None = None
    ) -> GasAmount:
        prepared = await self._prepare(lp_amount, coin, self._tolerance(slippage, estimate=True))
        return await estimate_prepared(self.pool, prepared)


class SwapOperation(PoolOperation):
    def _indices(self, input_coin: int | str, output_coin: int | str) -> tuple[int, int]:
        i = self.pool.coin_index(input_coin, underlying=self.underlying)
        j = self.pool.coin_index(output_coin, underlying=self.underlying)
        if i == j:
            raise SameCoinSwap(self.pool.name)
        return i, j

    async def expected(
        self, input_coin: int | str, output_coin: int | str, amount: AmountLike
    ) -> str:
        self.require_supported(f"{self.name}_expected")
        i, j = self._indices(input_coin, output_coin)
        (output,) = await self.pool.get_dy(
            i, j, [parse_units(amount, self.decimals[i])], underlying=self.underlying
        )
        return format_units(output, self.decimals[j])

    async def price_impact(
        self, input_coin: int | str, output_coin: int | str, amount: AmountLike
    ) -> str:
        """
        Percentage shortfall of the trade's rate against the rate of a trade a thousand times
        smaller, to 4 decimal places.
        """

        self.require_supported(f"{self.name}_price_impact")
        i, j = self._indices(input_coin, output_coin)
        parsed = parse_units(amount, self.decimals[i])
        small_amount = max(parsed // PRICE_IMPACT_REFERENCE_DIVISOR, 1)
        if small_amount >= parsed:
            return "0"

        output, small_output = await self.pool.get_dy(
            i, j, [parsed, small_amount], underlying=self.underlying
        )
        impact = price_impact(
            Amount(parsed, self.decimals[i]).decimal,
            Amount(output, self.decimals[j]).decimal,
            Amount(small_amount, self.decimals[i]).decimal,
            Amount(small_output, self.decimals[j]).decimal,
        )
        return trim_decimal_string(format(impact, "f"))

    async def is_approved(self, input_coin: int | str, amount: AmountLike) -> bool:
        self.require_supported(f"{self.name}_is_approved")
        i = self.pool.coin_index(input_coin, underlying=self.underlying)
        return await self._is_approved(
            (self.coins[i],), (parse_units(amount, self.decimals[i]),)
        )

    async def approve(self, input_coin: int | str, amount: AmountLike) -> list[HexBytes]:
        self.require_supported(f"{self.name}_approve")
        i = self.pool.coin_index(input_coin, underlying=self.underlying)
        return await self._approve((self.coins[i],), (parse_units(amount, self.decimals[i]),))

    async def estimate_approve(self, input_coin: int | str, amount: AmountLike) -> GasAmount:
        self.require_supported(f"{self.name}_approve")
        i = self.pool.coin_index(input_coin, underlying=self.underlying)
        return await self._estimate_approve(
            (self.coins[i],), (parse_units(amount, self.decimals[i]),)
        )

    async def _prepare(
        self,
        input_coin: int | str,
        output_coin: int | str,
        amount: AmountLike,
        tolerance: Decimal,
    ) -> PreparedTransaction:
        self.require_supported()
        sender = self.pool.context.require_signer()
        i, j = self._indices(input_coin, output_coin)
        parsed = parse_units(amount, self.decimals[i])
        coin = self.coins[i]

        snapshot = await self.pool.allowances.snapshot((coin,), sender, self.spender)
        self._check_balances(
            snapshot,
            (parsed,),
            (self.pool.coin_labels(underlying=self.underlying)[i],),
            (self.decimals[i],),
        )

        (expected,) = await self.pool.get_dy(i, j, [parsed], underlying=self.underlying)
        minimum = min_received(Amount(expected, self.decimals[j]), tolerance).bound
        return self._prepared(
            self._transaction(
                sender,
                (i, j, parsed, minimum.value),
                value=parsed if coin == ETH_ADDRESS else 0,
            ),
            ApprovalRequirement(spender=self.spender, snapshot=snapshot, amounts=(parsed,)),
        )

    async def execute(
        self,
        input_coin: int | str,
        output_coin: int | str,
        amount: AmountLike,
        slippage: AmountLike | None = None,
    ) -> HexBytes:
        prepared = await self._prepare(
            input_coin, output_coin, amount, self._tolerance(slippage, estimate=False)
        )
        return await submit_prepared(self.pool, prepared)

    async def estimate(
        self,
        input_coin: int | str,
        output_coin: int | str,
        amount: AmountLike,
        slippage: AmountLike | None = None,
    ) -> GasAmount:
        prepared = await self._prepare(
            input_coin, output_coin, amount, self._tolerance(slippage, estimate=True)
        )
        return await estimate_prepared(self.pool, prepared)
