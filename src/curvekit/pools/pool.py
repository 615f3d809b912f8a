import dataclasses
from collections.abc import Iterator, Sequence
from decimal import Decimal, localcontext
from typing import TYPE_CHECKING, Any

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from curvekit.checksum_cache import get_checksum_address
from curvekit.constants import LP_TOKEN_DECIMALS
from curvekit.erc20.allowance import AllowanceManager, balance_reads
from curvekit.exceptions.math import InvalidAmount
from curvekit.exceptions.pool import (
    CoinIndexOutOfRange,
    UnknownCoin,
    UnsupportedOperationForPoolShape,
)
from curvekit.exceptions.transport import CallReverted
from curvekit.gas import GasEstimator
from curvekit.logging import logger
from curvekit.math.decimal_math import DECIMAL_PRECISION, quantize_down, to_integer
from curvekit.math.fixed_point import (
    Amount,
    format_units,
    parse_units,
    to_decimal,
    trim_decimal_string,
)
from curvekit.pools.descriptor import PoolDescriptor
from curvekit.pools.flags import PoolFlags
from curvekit.pools.gauge import GaugeOperations
from curvekit.pools.interface import ContractInterface, PoolInterfaces
from curvekit.pools.operations import (
    DepositOperation,
    SwapOperation,
    WithdrawImbalanceOperation,
    WithdrawOneCoinOperation,
    WithdrawOperation,
)
from curvekit.pools.variants import CallTarget, OperationVariant, OperationVariants
from curvekit.transport.base import ContractCall, SnapshotRead
from curvekit.types.aliases import AmountLike, GasAmount

if TYPE_CHECKING:
    from curvekit.context import PoolContext

RATE_PRECISION = 10**18

# Legacy lending pools whose wrapped coins expose their exchange rate under these names
EXCHANGE_RATE_STORED_POOLS = frozenset({"compound", "usdt", "ib"})
PRICE_PER_FULL_SHARE_POOLS = frozenset({"y", "busd", "pax"})


@dataclasses.dataclass(slots=True, frozen=True)
class PoolReserves:
    """
    Pool state read in one batch: wrapped coin balances, LP supply and lending rates (1e18 is
    parity), with the same figures for the base pool of a metapool.
    """

    balances: tuple[int, ...]
    total_supply: int
    rates: tuple[int, ...]
    base: "PoolReserves | None" = None


class CurvePool:
    """
    A pool assembled from its descriptor. The operation surface is identical for every pool shape;
    each family is served by the variant selected for this pool, and a family without a meaningful
    variant raises `UnsupportedOperationForPoolShape`.

    Amounts are accepted as decimal strings, ints, `Decimal`s or floats and returned as decimal
    strings with the coin's precision.
    """

    def __init__(
        self,
        *,
        context: "PoolContext",
        descriptor: PoolDescriptor,
        flags: PoolFlags,
        interfaces: PoolInterfaces,
        variants: OperationVariants,
        base_pool: "CurvePool | None" = None,
    ) -> None:
        self.context = context
        self.descriptor = descriptor
        self.flags = flags
        self.interfaces = interfaces
        self.variants = variants
        self.base_pool = base_pool

        self.gas_estimator = GasEstimator(
            context.transport, context.chain_id, context.settings.gas_multiplier
        )
        self.allowances = AllowanceManager(
            context.transport,
            self.gas_estimator,
            infinite_approve=context.settings.infinite_approve,
        )

        self._deposit = DepositOperation(self, variants.deposit)
        self._deposit_wrapped = DepositOperation(self, variants.deposit_wrapped)
        self._withdraw = WithdrawOperation(self, variants.withdraw)
        self._withdraw_wrapped = WithdrawOperation(self, variants.withdraw_wrapped)
        self._withdraw_imbalance = WithdrawImbalanceOperation(self, variants.withdraw_imbalance)
        self._withdraw_imbalance_wrapped = WithdrawImbalanceOperation(
            self, variants.withdraw_imbalance_wrapped
        )
        self._withdraw_one_coin = WithdrawOneCoinOperation(self, variants.withdraw_one_coin)
        self._withdraw_one_coin_wrapped = WithdrawOneCoinOperation(
            self, variants.withdraw_one_coin_wrapped
        )
        self._swap = SwapOperation(self, variants.swap)
        self._swap_wrapped = SwapOperation(self, variants.swap_wrapped)

        self.gauge = GaugeOperations(self)
        self.estimate_gas = PoolGasEstimates(self)

    def __repr__(self) -> str:  # pragma: no cover
        return f"{type(self).__name__}(id={self.id}, address={self.address})"

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def address(self) -> ChecksumAddress:
        return self.descriptor.address

    @property
    def lp_token(self) -> ChecksumAddress:
        return self.descriptor.lp_token

    @property
    def zap(self) -> ChecksumAddress | None:
        return self.descriptor.zap if self.flags.has_zap else None

    @property
    def underlying_coins(self) -> tuple[ChecksumAddress, ...]:
        return self.descriptor.underlying_coins

    @property
    def wrapped_coins(self) -> tuple[ChecksumAddress, ...]:
        return self.descriptor.wrapped_coins

    def coins(self, *, underlying: bool) -> tuple[ChecksumAddress, ...]:
        return self.descriptor.underlying_coins if underlying else self.descriptor.wrapped_coins

    def decimals(self, *, underlying: bool) -> tuple[int, ...]:
        return (
            self.descriptor.underlying_decimals if underlying else self.descriptor.wrapped_decimals
        )

    def coin_labels(self, *, underlying: bool) -> tuple[str, ...]:
        symbols = (
            self.descriptor.underlying_symbols if underlying else self.descriptor.wrapped_symbols
        )
        return symbols or self.coins(underlying=underlying)

    def contract_address(self, target: CallTarget) -> ChecksumAddress:
        if target is CallTarget.POOL:
            return self.address
        if self.zap is None:
            raise UnsupportedOperationForPoolShape(self.name, "zap")
        return self.zap

    def contract_interface(self, target: CallTarget) -> ContractInterface:
        if target is CallTarget.POOL:
            return self.interfaces.pool
        if self.interfaces.zap is None:
            raise UnsupportedOperationForPoolShape(self.name, "zap")
        return self.interfaces.zap

    def coin_index(self, coin: int | str, *, underlying: bool = True) -> int:
        """
        Resolve a coin given as an index, an address or a symbol to its index among the underlying
        (or wrapped) coins.
        """

        coins = self.coins(underlying=underlying)
        if isinstance(coin, bool) or not isinstance(coin, (int, str)):
            raise CoinIndexOutOfRange(self.name, coin, len(coins))

        if isinstance(coin, int):
            if not 0 <= coin < len(coins):
                raise CoinIndexOutOfRange(self.name, coin, len(coins))
            return coin

        if coin.startswith("0x") and len(coin) == 42:  # noqa: PLR2004
            address = get_checksum_address(coin)
            if address in coins:
                return coins.index(address)
        else:
            symbols = [
                symbol.lower()
                for symbol in (
                    self.descriptor.underlying_symbols
                    if underlying
                    else self.descriptor.wrapped_symbols
                )
            ]
            if coin.lower() in symbols:
                return symbols.index(coin.lower())

        raise UnknownCoin(self.name, coin, underlying)

    def _owner(self, address: str | None) -> ChecksumAddress:
        if address is None:
            return self.context.require_signer()
        return get_checksum_address(address)

    def _view_call(
        self,
        target: CallTarget,
        function: str,
        arguments: tuple[Any, ...],
        *,
        flag: bool | None = None,
    ) -> ContractCall:
        """
        Build a read call, appending `flag` when the contract has an overload taking a trailing
        boolean.
        """

        interface = self.contract_interface(target)
        signature = None
        if flag is not None:
            flagged = interface.signature(function, len(arguments) + 1)
            if flagged is not None and flagged.endswith(",bool)"):
                signature = flagged
                arguments = (*arguments, flag)
        if signature is None:
            signature = interface.signature(function, len(arguments))
        if signature is None:
            raise UnsupportedOperationForPoolShape(self.name, function)
        return ContractCall(self.contract_address(target), signature, arguments)

    # Reserves

    def _rate_function(self, i: int) -> str | None:
        if not self.descriptor.lending_coins[i]:
            return None
        if self.id in EXCHANGE_RATE_STORED_POOLS:
            return "exchangeRateStored()"
        if self.id in PRICE_PER_FULL_SHARE_POOLS:
            return "getPricePerFullShare()"
        return None

    def _rate_reads(self) -> list[SnapshotRead]:
        return [
            ContractCall(coin, rate_function)
            for i, coin in enumerate(self.wrapped_coins)
            if (rate_function := self._rate_function(i)) is not None
        ]

    def _parse_rates(self, results: Iterator[Any]) -> tuple[int, ...]:
        return tuple(
            RATE_PRECISION if self._rate_function(i) is None else next(results)
            for i in range(self.descriptor.coin_count)
        )

    async def rates(self) -> tuple[int, ...]:
        """
        Exchange rates of the wrapped coins against their underlying coins, 1e18 being parity.
        """

        return self._parse_rates(iter(await self.context.transport.call_many(self._rate_reads())))

    def _reserve_reads(self) -> list[SnapshotRead]:
        balances_signature = self.interfaces.pool.signature("balances", 1) or "balances(uint256)"
        reads: list[SnapshotRead] = [
            ContractCall(self.address, balances_signature, (i,))
            for i in range(self.descriptor.coin_count)
        ]
        reads.append(ContractCall(self.lp_token, "totalSupply()"))
        reads.extend(self._rate_reads())
        if self.base_pool is not None:
            reads.extend(self.base_pool._reserve_reads())
        return reads

    def _parse_reserves(self, results: Iterator[Any]) -> PoolReserves:
        balances = tuple(next(results) for _ in range(self.descriptor.coin_count))
        total_supply = next(results)
        rates = self._parse_rates(results)
        base = self.base_pool._parse_reserves(results) if self.base_pool is not None else None
        return PoolReserves(balances, total_supply, rates, base)

    async def read_with_reserves(
        self, reads: Sequence[SnapshotRead]
    ) -> tuple[PoolReserves, list[Any]]:
        """
        Read the reserves together with additional values in a single batch.
        """

        reserve_reads = self._reserve_reads()
        results = await self.context.transport.call_many([*reserve_reads, *reads])
        reserves = self._parse_reserves(iter(results[: len(reserve_reads)]))
        return reserves, results[len(reserve_reads) :]

    async def reserves(self) -> PoolReserves:
        reserves, _ = await self.read_with_reserves(())
        return reserves

    def _expected_wrapped_amounts(self, reserves: PoolReserves, lp_amount: int) -> list[int]:
        if reserves.total_supply == 0:
            return [0 for _ in reserves.balances]
        return [balance * lp_amount // reserves.total_supply for balance in reserves.balances]

    def _to_underlying_amounts(
        self, reserves: PoolReserves, wrapped_amounts: Sequence[int]
    ) -> list[int]:
        if self.flags.is_meta and self.base_pool is not None and reserves.base is not None:
            amounts = list(wrapped_amounts)
            meta_coin_index = self.descriptor.resolved_meta_coin_index
            base_lp_amount = amounts.pop(meta_coin_index)
            amounts[meta_coin_index:meta_coin_index] = self.base_pool._withdraw_underlying_amounts(
                reserves.base, base_lp_amount
            )
            return amounts
        if self.flags.is_lending or self.flags.is_crypto:
            return [
                amount * rate // RATE_PRECISION
                for amount, rate in zip(wrapped_amounts, reserves.rates, strict=True)
            ]
        return list(wrapped_amounts)

    def _withdraw_underlying_amounts(self, reserves: PoolReserves, lp_amount: int) -> list[int]:
        return self._to_underlying_amounts(
            reserves, self._expected_wrapped_amounts(reserves, lp_amount)
        )

    def reserve_amounts(self, reserves: PoolReserves, *, underlying: bool) -> list[int]:
        if underlying:
            return self._to_underlying_amounts(reserves, reserves.balances)
        return list(reserves.balances)

    async def withdraw_amounts(self, lp_amount: int, *, underlying: bool) -> list[int]:
        """
        Coin amounts paid out for `lp_amount` by a proportional withdrawal.
        """

        reserves = await self.reserves()
        if underlying:
            return self._withdraw_underlying_amounts(reserves, lp_amount)
        return self._expected_wrapped_amounts(reserves, lp_amount)

    async def balances(self) -> list[str]:
        """
        Pool reserves in underlying coins, with lending rates applied and metapool base LP
        expanded into the base pool's coins.
        """

        amounts = self.reserve_amounts(await self.reserves(), underlying=True)
        return [
            format_units(amount, decimals)
            for amount, decimals in zip(amounts, self.decimals(underlying=True), strict=True)
        ]

    async def wrapped_balances(self) -> list[str]:
        reserves = await self.reserves()
        return [
            format_units(amount, decimals)
            for amount, decimals in zip(
                reserves.balances, self.decimals(underlying=False), strict=True
            )
        ]

    async def wallet_balances(
        self, address: str | None = None, *, underlying: bool = True
    ) -> list[str]:
        results = await self.context.transport.call_many(
            balance_reads(self.coins(underlying=underlying), self._owner(address))
        )
        return [
            format_units(balance, decimals)
            for balance, decimals in zip(results, self.decimals(underlying=underlying), strict=True)
        ]

    async def wallet_wrapped_balances(self, address: str | None = None) -> list[str]:
        return await self.wallet_balances(address, underlying=False)

    async def lp_token_balance(self, address: str | None = None) -> str:
        (balance,) = await self.context.transport.call_many(
            balance_reads((self.lp_token,), self._owner(address))
        )
        return format_units(balance, LP_TOKEN_DECIMALS)

    # Prices

    async def usd_prices(self, *, underlying: bool) -> list[Decimal]:
        oracle = self.context.require_price_oracle()
        return await oracle.get_usd_prices(self.coins(underlying=underlying))

    async def value_prices(self, *, underlying: bool) -> list[Decimal]:
        """
        Prices used to compare amounts of different coins. Crypto pools use USD prices; stable
        pools count every coin at par, except the base LP coin of a metapool, which is valued at
        the base pool's virtual price.
        """

        if self.flags.is_crypto:
            return await self.usd_prices(underlying=underlying)

        prices = [Decimal(1) for _ in self.coins(underlying=underlying)]
        if not underlying and self.flags.is_meta and self.base_pool is not None:
            virtual_price = await self.context.transport.call(
                ContractCall(self.base_pool.address, "get_virtual_price()")
            )
            prices[self.descriptor.resolved_meta_coin_index] = Amount(
                virtual_price, LP_TOKEN_DECIMALS
            ).decimal
        return prices

    async def total_liquidity_usd(self) -> str:
        amounts = self.reserve_amounts(await self.reserves(), underlying=True)
        prices = await self.usd_prices(underlying=True)
        total = sum(
            (
                Amount(amount, decimals).decimal * price
                for amount, decimals, price in zip(
                    amounts, self.decimals(underlying=True), prices, strict=True
                )
            ),
            Decimal(0),
        )
        return format(total, "f")

    # Contract views

    async def calc_token_amount(
        self, amounts: Sequence[int], *, is_deposit: bool, underlying: bool
    ) -> int:
        """
        LP amount minted by a deposit (or burned by an imbalanced withdrawal) of `amounts`.

        A deposit into a pool without LP supply cannot be quoted by the pool; it is priced as the
        initial seeding deposit instead.
        """

        through_zap = underlying and self.flags.is_meta and self.interfaces.zap is not None
        target = CallTarget.ZAP if through_zap else CallTarget.POOL
        quoted = list(amounts)
        if underlying and self.flags.is_lending and not self.flags.is_meta:
            # Lending pools quote wrapped amounts
            quoted = [
                amount * RATE_PRECISION // rate
                for amount, rate in zip(amounts, await self.rates(), strict=True)
            ]
        arguments: tuple[Any, ...] = (quoted,)
        if underlying and self.flags.is_meta_factory:
            arguments = (self.address, quoted)

        try:
            return await self.context.transport.call(
                self._view_call(target, "calc_token_amount", arguments, flag=is_deposit)
            )
        except CallReverted:
            if not is_deposit:
                raise
            total_supply = await self.context.transport.call(
                ContractCall(self.lp_token, "totalSupply()")
            )
            if total_supply > 0:
                raise
            logger.debug(f"{self.name} pool has no LP supply, pricing the deposit as its seed")
            return self._seed_lp_amount(amounts, underlying=underlying)

    def meta_underlying_seed_amounts(self, amount: AmountLike) -> list[str]:
        """
        Initial deposit for an empty stable metapool: `amount` of the first coin, split evenly
        across the base pool's coins for the rest.
        """

        if self.flags.is_crypto or not self.flags.is_meta:
            raise UnsupportedOperationForPoolShape(self.name, "meta_underlying_seed_amounts")

        first = to_decimal(amount)
        if first <= 0:
            raise InvalidAmount(amount, "initial deposit amounts must be > 0")

        decimals = self.decimals(underlying=True)
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            others = first / (len(decimals) - 1)
        return [
            trim_decimal_string(format(quantize_down(first, decimals[0]), "f")),
            *(
                trim_decimal_string(format(quantize_down(others, coin_decimals), "f"))
                for coin_decimals in decimals[1:]
            ),
        ]

    def _seed_lp_amount(self, amounts: Sequence[int], *, underlying: bool) -> int:
        decimals = self.decimals(underlying=underlying)
        human = [Amount(amount, d).decimal for amount, d in zip(amounts, decimals, strict=True)]
        if any(amount <= 0 for amount in human):
            raise InvalidAmount(tuple(amounts), "initial deposit amounts must be > 0")

        if self.flags.is_meta and underlying:
            if self.flags.is_crypto:
                raise InvalidAmount(
                    tuple(amounts), "the initial deposit of a crypto metapool must be wrapped coins"
                )
            seed_amounts = self.meta_underlying_seed_amounts(human[0])
            if [Decimal(seed) for seed in seed_amounts] != human:
                raise InvalidAmount(
                    tuple(amounts), f"initial deposit amounts must be {seed_amounts}"
                )
        elif self.flags.is_crypto:
            with localcontext() as ctx:
                ctx.prec = DECIMAL_PRECISION
                product = Decimal(1)
                for amount in human:
                    product *= amount
                geometric_mean = product ** (Decimal(1) / len(human))
            return to_integer(geometric_mean.scaleb(LP_TOKEN_DECIMALS), round_up=False)
        elif any(amount != human[0] for amount in human):
            raise InvalidAmount(tuple(amounts), "initial deposit amounts must be equal")

        return sum(parse_units(amount, LP_TOKEN_DECIMALS) for amount in human)

    async def calc_withdraw_one_coin(
        self,
        variant: OperationVariant,
        lp_amount: int,
        i: int,
        *,
        underlying: bool,
    ) -> int:
        arguments: tuple[Any, ...] = (lp_amount, i)
        if variant.pool_qualified:
            arguments = (self.address, *arguments)
        return await self.context.transport.call(
            self._view_call(variant.target, "calc_withdraw_one_coin", arguments, flag=underlying)
        )

    def _get_dy_call(self, i: int, j: int, amount: int, *, underlying: bool) -> ContractCall:
        if not underlying:
            return self._view_call(CallTarget.POOL, "get_dy", (i, j, amount))

        target = CallTarget.POOL
        if self.flags.is_crypto and self.flags.is_meta and self.interfaces.zap is not None:
            target = CallTarget.ZAP
        interface = self.contract_interface(target)
        if interface.has_function("get_dy_underlying"):
            return self._view_call(target, "get_dy_underlying", (i, j, amount))
        if interface.signature("get_dy", 4) is not None:  # noqa: PLR2004
            return self._view_call(target, "get_dy", (self.address, i, j, amount))
        return self._view_call(target, "get_dy", (i, j, amount))

    async def get_dy(
        self, i: int, j: int, amounts: Sequence[int], *, underlying: bool
    ) -> list[int]:
        """
        Swap outputs for each input amount, read in one batch.
        """

        return await self.context.transport.call_many(
            [self._get_dy_call(i, j, amount, underlying=underlying) for amount in amounts]
        )

    # Deposit

    async def deposit_expected(self, amounts: Sequence[AmountLike]) -> str:
        return await self._deposit.expected(amounts)

    async def deposit_balanced_amounts(self) -> list[str]:
        return await self._deposit.balanced_amounts()

    async def deposit_bonus(self, amounts: Sequence[AmountLike]) -> str:
        return await self._deposit.bonus(amounts)

    async def deposit_is_approved(self, amounts: Sequence[AmountLike]) -> bool:
        return await self._deposit.is_approved(amounts)

    async def deposit_approve(self, amounts: Sequence[AmountLike]) -> list[HexBytes]:
        return await self._deposit.approve(amounts)

    async def deposit(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> HexBytes:
        return await self._deposit.execute(amounts, slippage)

    async def deposit_wrapped_expected(self, amounts: Sequence[AmountLike]) -> str:
        return await self._deposit_wrapped.expected(amounts)

    async def deposit_wrapped_balanced_amounts(self) -> list[str]:
        return await self._deposit_wrapped.balanced_amounts()

    async def deposit_wrapped_bonus(self, amounts: Sequence[AmountLike]) -> str:
        return await self._deposit_wrapped.bonus(amounts)

    async def deposit_wrapped_is_approved(self, amounts: Sequence[AmountLike]) -> bool:
        return await self._deposit_wrapped.is_approved(amounts)

    async def deposit_wrapped_approve(self, amounts: Sequence[AmountLike]) -> list[HexBytes]:
        return await self._deposit_wrapped.approve(amounts)

    async def deposit_wrapped(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> HexBytes:
        return await self._deposit_wrapped.execute(amounts, slippage)

    # Withdraw

    async def withdraw_expected(self, lp_amount: AmountLike) -> list[str]:
        return await self._withdraw.expected(lp_amount)

    async def withdraw_is_approved(self, lp_amount: AmountLike) -> bool:
        return await self._withdraw.is_approved(lp_amount)

    async def withdraw_approve(self, lp_amount: AmountLike) -> list[HexBytes]:
        return await self._withdraw.approve(lp_amount)

    async def withdraw(self, lp_amount: AmountLike, slippage: AmountLike | None = None) -> HexBytes:
        return await self._withdraw.execute(lp_amount, slippage)

    async def withdraw_wrapped_expected(self, lp_amount: AmountLike) -> list[str]:
        return await self._withdraw_wrapped.expected(lp_amount)

    async def withdraw_wrapped_is_approved(self, lp_amount: AmountLike) -> bool:
        return await self._withdraw_wrapped.is_approved(lp_amount)

    async def withdraw_wrapped_approve(self, lp_amount: AmountLike) -> list[HexBytes]:
        return await self._withdraw_wrapped.approve(lp_amount)

    async def withdraw_wrapped(
        self, lp_amount: AmountLike, slippage: AmountLike | None = None
    ) -> HexBytes:
        return await self._withdraw_wrapped.execute(lp_amount, slippage)

    # Imbalanced withdraw

    async def withdraw_imbalance_expected(self, amounts: Sequence[AmountLike]) -> str:
        return await self._withdraw_imbalance.expected(amounts)

    async def withdraw_imbalance_bonus(self, amounts: Sequence[AmountLike]) -> str:
        return await self._withdraw_imbalance.bonus(amounts)

    async def withdraw_imbalance_is_approved(self, amounts: Sequence[AmountLike]) -> bool:
        return await self._withdraw_imbalance.is_approved(amounts)

    async def withdraw_imbalance_approve(self, amounts: Sequence[AmountLike]) -> list[HexBytes]:
        return await self._withdraw_imbalance.approve(amounts)

    async def withdraw_imbalance(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> HexBytes:
        return await self._withdraw_imbalance.execute(amounts, slippage)

    async def withdraw_imbalance_wrapped_expected(self, amounts: Sequence[AmountLike]) -> str:
        return await self._withdraw_imbalance_wrapped.expected(amounts)

    async def withdraw_imbalance_wrapped_bonus(self, amounts: Sequence[AmountLike]) -> str:
        return await self._withdraw_imbalance_wrapped.bonus(amounts)

    async def withdraw_imbalance_wrapped_is_approved(self, amounts: Sequence[AmountLike]) -> bool:
        return await self._withdraw_imbalance_wrapped.is_approved(amounts)

    async def withdraw_imbalance_wrapped_approve(
        self, amounts: Sequence[AmountLike]
    ) -> list[HexBytes]:
        return await self._withdraw_imbalance_wrapped.approve(amounts)

    async def withdraw_imbalance_wrapped(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> HexBytes:
        return await self._withdraw_imbalance_wrapped.execute(amounts, slippage)

    # Single-coin withdraw

    async def withdraw_one_coin_expected(self, lp_amount: AmountLike, coin: int | str) -> str:
        return await self._withdraw_one_coin.expected(lp_amount, coin)

    async def withdraw_one_coin_bonus(self, lp_amount: AmountLike, coin: int | str) -> str:
        return await self._withdraw_one_coin.bonus(lp_amount, coin)

    async def withdraw_one_coin_is_approved(self, lp_amount: AmountLike) -> bool:
        return await self._withdraw_one_coin.is_approved(lp_amount)

    async def withdraw_one_coin_approve(self, lp_amount: AmountLike) -> list[HexBytes]:
        return await self._withdraw_one_coin.approve(lp_amount)

    async def withdraw_one_coin(
        self, lp_amount: AmountLike, coin: int | str, slippage: AmountLike | None = None
    ) -> HexBytes:
        return await self._withdraw_one_coin.execute(lp_amount, coin, slippage)

    async def withdraw_one_coin_wrapped_expected(
        self, lp_amount: AmountLike, coin: int | str
    ) -> str:
        return await self._withdraw_one_coin_wrapped.expected(lp_amount, coin)

    async def withdraw_one_coin_wrapped_bonus(self, lp_amount: AmountLike, coin: int | str) -> str:
        return await self._withdraw_one_coin_wrapped.bonus(lp_amount, coin)

    async def withdraw_one_coin_wrapped_is_approved(self, lp_amount: AmountLike) -> bool:
        return await self._withdraw_one_coin_wrapped.is_approved(lp_amount)

    async def withdraw_one_coin_wrapped_approve(self, lp_amount: AmountLike) -> list[HexBytes]:
        return await self._withdraw_one_coin_wrapped.approve(lp_amount)

    async def withdraw_one_coin_wrapped(
        self, lp_amount: AmountLike, coin: int | str, slippage: AmountLike | None = None
    ) -> HexBytes:
        return await self._withdraw_one_coin_wrapped.execute(lp_amount, coin, slippage)

    # Swap

    async def swap_expected(
        self, input_coin: int | str, output_coin: int | str, amount: AmountLike
    ) -> str:
        return await self._swap.expected(input_coin, output_coin, amount)

    async def swap_price_impact(
        self, input_coin: int | str, output_coin: int | str, amount: AmountLike
    ) -> str:
        return await self._swap.price_impact(input_coin, output_coin, amount)

    async def swap_is_approved(self, input_coin: int | str, amount: AmountLike) -> bool:
        return await self._swap.is_approved(input_coin, amount)

    async def swap_approve(self, input_coin: int | str, amount: AmountLike) -> list[HexBytes]:
        return await self._swap.approve(input_coin, amount)

    async def swap(
        self,
        input_coin: int | str,
        output_coin: int | str,
        amount: AmountLike,
        slippage: AmountLike | None = None,
    ) -> HexBytes:
        return await self._swap.execute(input_coin, output_coin, amount, slippage)

    async def swap_wrapped_expected(
        self, input_coin: int | str, output_coin: int | str, amount: AmountLike
    ) -> str:
        return await self._swap_wrapped.expected(input_coin, output_coin, amount)

    async def swap_wrapped_price_impact(
        self, input_coin: int | str, output_coin: int | str, amount: AmountLike
    ) -> str:
        return await self._swap_wrapped.price_impact(input_coin, output_coin, amount)

    async def swap_wrapped_is_approved(self, input_coin: int | str, amount: AmountLike) -> bool:
        return await self._swap_wrapped.is_approved(input_coin, amount)

    async def swap_wrapped_approve(
        self, input_coin: int | str, amount: AmountLike
    ) -> list[HexBytes]:
        return await self._swap_wrapped.approve(input_coin, amount)

    async def swap_wrapped(
        self,
        input_coin: int | str,
        output_coin: int | str,
        amount: AmountLike,
        slippage: AmountLike | None = None,
    ) -> HexBytes:
        return await self._swap_wrapped.execute(input_coin, output_coin, amount, slippage)

    # Gauge

    async def stake_is_approved(self, lp_amount: AmountLike) -> bool:
        return await self.gauge.stake_is_approved(lp_amount)

    async def stake_approve(self, lp_amount: AmountLike) -> list[HexBytes]:
        return await self.gauge.stake_approve(lp_amount)

    async def stake(self, lp_amount: AmountLike) -> HexBytes:
        return await self.gauge.stake(lp_amount)

    async def unstake(self, lp_amount: AmountLike) -> HexBytes:
        return await self.gauge.unstake(lp_amount)

    async def claim_crv(self) -> HexBytes:
        return await self.gauge.claim_crv()


class PoolGasEstimates:
    """
    Raw gas estimates for the operations of a pool, `pool.estimate_gas.<operation>(...)`.

    Estimates are never multiplied. On rollups each estimate is an `(execution, l1_data)` pair.
    Estimating an operation that needs an allowance the signer has not granted raises
    `InsufficientAllowanceForEstimate`.
    """

    def __init__(self, pool: CurvePool) -> None:
        self._pool = pool

    async def deposit_approve(self, amounts: Sequence[AmountLike]) -> GasAmount:
        return await self._pool._deposit.estimate_approve(amounts)

    async def deposit(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._deposit.estimate(amounts, slippage)

    async def deposit_wrapped_approve(self, amounts: Sequence[AmountLike]) -> GasAmount:
        return await self._pool._deposit_wrapped.estimate_approve(amounts)

    async def deposit_wrapped(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._deposit_wrapped.estimate(amounts, slippage)

    async def withdraw_approve(self, lp_amount: AmountLike) -> GasAmount:
        return await self._pool._withdraw.estimate_approve(lp_amount)

    async def withdraw(
        self, lp_amount: AmountLike, slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._withdraw.estimate(lp_amount, slippage)

    async def withdraw_wrapped_approve(self, lp_amount: AmountLike) -> GasAmount:
        return await self._pool._withdraw_wrapped.estimate_approve(lp_amount)

    async def withdraw_wrapped(
        self, lp_amount: AmountLike, slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._withdraw_wrapped.estimate(lp_amount, slippage)

    async def withdraw_imbalance_approve(self, amounts: Sequence[AmountLike]) -> GasAmount:
        return await self._pool._withdraw_imbalance.estimate_approve(amounts)

    async def withdraw_imbalance(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._withdraw_imbalance.estimate(amounts, slippage)

    async def withdraw_imbalance_wrapped_approve(self, amounts: Sequence[AmountLike]) -> GasAmount:
        return await self._pool._withdraw_imbalance_wrapped.estimate_approve(amounts)

    async def withdraw_imbalance_wrapped(
        self, amounts: Sequence[AmountLike], slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._withdraw_imbalance_wrapped.estimate(amounts, slippage)

    async def withdraw_one_coin_approve(self, lp_amount: AmountLike) -> GasAmount:
        return await self._pool._withdraw_one_coin.estimate_approve(lp_amount)

    async def withdraw_one_coin(
        self, lp_amount: AmountLike, coin: int | str, slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._withdraw_one_coin.estimate(lp_amount, coin, slippage)

    async def withdraw_one_coin_wrapped_approve(self, lp_amount: AmountLike) -> GasAmount:
        return await self._pool._withdraw_one_coin_wrapped.estimate_approve(lp_amount)

    async def withdraw_one_coin_wrapped(
        self, lp_amount: AmountLike, coin: int | str, slippage: AmountLike | None = None
    ) -> GasAmount:
        return await self._pool._withdraw_one_coin_wrapped.estimate(lp_amount, coin, slippage)

    async def swap_approve(self, input_coin: int | str, amount: AmountLike) -> GasAmount:
        return await self._pool._swap.estimate_approve(input_coin, amount)

    async def swap(
        self,
        input_coin: int | str,
        output_coin: int | str,
        amount: AmountLike,
        slippage: AmountLike | None = None,
    ) -> GasAmount:
        return await self._pool._swap.estimate(input_coin, output_coin, amount, slippage)

    async def swap_wrapped_approve(self, input_coin: int | str, amount: AmountLike) -> GasAmount:
        return await self._pool._swap_wrapped.estimate_approve(input_coin, amount)

    async def swap_wrapped(
        self,
        input_coin: int | str,
        output_coin: int | str,
        amount: AmountLike,
        slippage: AmountLike | None = None,
    ) -> GasAmount:
        return await self._pool._swap_wrapped.estimate(input_coin, output_coin, amount, slippage)

    async def stake_approve(self, lp_amount: AmountLike) -> GasAmount:
        return await self._pool.gauge.estimate_stake_approve(lp_amount)

    async def stake(self, lp_amount: AmountLike) -> GasAmount:
        return await self._pool.gauge.estimate_stake(lp_amount)

    async def unstake(self, lp_amount: AmountLike) -> GasAmount:
        return await self._pool.gauge.estimate_unstake(lp_amount)

    async def claim_crv(self) -> GasAmount:
        return await self._pool.gauge.estimate_claim_crv()
