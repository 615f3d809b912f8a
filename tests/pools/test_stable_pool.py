from decimal import Decimal
from typing import Any

import pytest
from hexbytes import HexBytes

from curvekit.constants import MAX_UINT256
from curvekit.exceptions import (
    AmountsLengthMismatch,
    CallReverted,
    CoinIndexOutOfRange,
    InsufficientAllowanceForEstimate,
    InsufficientBalance,
    InvalidAmount,
    InvalidSlippage,
    MissingSigner,
    SameCoinSwap,
    UnknownCoin,
    UnsupportedOperationForPoolShape,
)
from curvekit.functions import encode_function_calldata, function_selector
from curvekit.pools import CurvePool, PoolAssembler
from tests.conftest import (
    DAI,
    DEFAULT_GAS,
    DEFAULT_L1_DATA_GAS,
    LP_TOKEN,
    POOL_ADDRESS,
    SIGNER,
    USDC,
    USDT,
    FakeTransport,
    address,
    make_context,
    three_pool_descriptor,
)

COINS = (DAI, USDC, USDT)
CALC_TOKEN_AMOUNT = "calc_token_amount(uint256[3],bool)"
APPROVE = function_selector("approve(address,uint256)")


def assemble(transport: FakeTransport, **context_options: Any) -> CurvePool:
    context = make_context(transport, [three_pool_descriptor()], **context_options)
    return PoolAssembler(context).assemble("3pool")


@pytest.fixture
def pool(transport: FakeTransport) -> CurvePool:
    return assemble(transport)


def set_reserves(transport: FakeTransport, balances: list[int], total_supply: int) -> None:
    for i, balance in enumerate(balances):
        transport.set_call(POOL_ADDRESS, "balances(uint256)", (i,), balance)
    transport.set_call(LP_TOKEN, "totalSupply()", (), total_supply)


def set_wallet(
    transport: FakeTransport,
    coins: tuple[str, ...],
    balances: list[int],
    allowances: list[int],
    spender: str = POOL_ADDRESS,
) -> None:
    for coin, balance, allowance in zip(coins, balances, allowances, strict=True):
        transport.set_call(coin, "balanceOf(address)", (SIGNER,), balance)
        transport.set_call(coin, "allowance(address,address)", (SIGNER, spender), allowance)


DEPOSIT_AMOUNTS = [100 * 10**18, 100 * 10**6, 100 * 10**6]


class TestCoins:
    def test_coin_index(self, pool: CurvePool) -> None:
        assert pool.coin_index(0) == 0
        assert pool.coin_index("usdc") == 1
        assert pool.coin_index("USDT") == 2
        assert pool.coin_index(USDT.lower()) == 2

    @pytest.mark.parametrize("coin", [3, -1, True, 1.0])
    def test_coin_index_out_of_range(self, pool: CurvePool, coin: object) -> None:
        with pytest.raises(CoinIndexOutOfRange):
            pool.coin_index(coin)  # type: ignore[arg-type]

    @pytest.mark.parametrize("coin", ["FRAX", "0x000000000000000000000000000000000000dEaD"])
    def test_unknown_coin(self, pool: CurvePool, coin: str) -> None:
        with pytest.raises(UnknownCoin):
            pool.coin_index(coin)

    def test_assembler_reuses_pools(self, transport: FakeTransport) -> None:
        assembler = PoolAssembler(make_context(transport, [three_pool_descriptor()]))
        assert assembler.assemble("3pool") is assembler.assemble("3pool")

    def test_pool_without_zap(self, pool: CurvePool) -> None:
        assert pool.zap is None
        assert pool.interfaces.zap is None


class TestBalances:
    async def test_balances(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_reserves(transport, [1500 * 10**18, 1_250_500_000, 7], 3000 * 10**18)
        assert await pool.balances() == ["1500", "1250.5", "0.000007"]
        assert await pool.wrapped_balances() == ["1500", "1250.5", "0.000007"]
        assert len(transport.batches) == 2

    async def test_wallet_balances(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_wallet(transport, COINS, [10**18, 2 * 10**6, 0], [0, 0, 0])
        transport.set_call(LP_TOKEN, "balanceOf(address)", (SIGNER,), 5 * 10**17)

        assert await pool.wallet_balances() == ["1", "2", "0"]
        assert await pool.lp_token_balance() == "0.5"

    async def test_wallet_balances_of_other_address(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        other = address(0x0123)
        for coin in COINS:
            transport.set_call(coin, "balanceOf(address)", (other,), 10**6)
        assert await pool.wallet_balances(other.lower()) == ["0.000000000001", "1", "1"]


class TestDeposit:
    async def test_expected(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), 299 * 10**18)
        assert await pool.deposit_expected(["100", 100, Decimal(100)]) == "299"

    async def test_expected_rejects_wrong_amount_count(self, pool: CurvePool) -> None:
        with pytest.raises(AmountsLengthMismatch):
            await pool.deposit_expected(["100", "100"])

    async def test_expected_rejects_excess_precision(self, pool: CurvePool) -> None:
        with pytest.raises(InvalidAmount):
            await pool.deposit_expected(["1", "1.0000001", "1"])

    async def test_empty_pool_is_priced_as_seed(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        transport.set_call(
            POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), CallReverted("empty pool")
        )
        transport.set_call(LP_TOKEN, "totalSupply()", (), 0)
        assert await pool.deposit_expected(["100", "100", "100"]) == "300"

    async def test_empty_pool_seed_must_be_balanced(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        amounts = [100 * 10**18, 50 * 10**6, 100 * 10**6]
        transport.set_call(
            POOL_ADDRESS, CALC_TOKEN_AMOUNT, (amounts, True), CallReverted("empty pool")
        )
        transport.set_call(LP_TOKEN, "totalSupply()", (), 0)
        with pytest.raises(InvalidAmount):
            await pool.deposit_expected(["100", "50", "100"])

    async def test_revert_with_supply_is_raised(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        transport.set_call(
            POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), CallReverted("paused")
        )
        transport.set_call(LP_TOKEN, "totalSupply()", (), 10**18)
        with pytest.raises(CallReverted):
            await pool.deposit_expected(["100", "100", "100"])

    async def test_execute_approves_then_deposits(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        set_wallet(transport, COINS, [10**21, 10**9, 10**9], [0, 5, MAX_UINT256])
        transport.set_call(POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), 299 * 10**18)

        transaction_hash = await pool.deposit(["100", "100", "100"])

        # DAI is approved, USDC is reset and approved, USDT already has an allowance
        assert transport.sent_selectors() == [
            APPROVE,
            APPROVE,
            APPROVE,
            function_selector("add_liquidity(uint256[3],uint256)"),
        ]
        assert [transaction.to for transaction in transport.sent[:3]] == [DAI, USDC, USDC]
        assert len(transport.confirmed) == 3

        deposit = transport.sent[-1]
        assert transaction_hash == HexBytes((4).to_bytes(32, "big"))
        assert deposit.to == POOL_ADDRESS
        assert deposit.sender == SIGNER
        assert deposit.value == 0
        assert deposit.gas == 130_000
        # 0.5% below 299 LP
        assert deposit.data == encode_function_calldata(
            "add_liquidity(uint256[3],uint256)", (DEPOSIT_AMOUNTS, 297_505_000_000_000_000_000)
        )

    async def test_execute_with_custom_slippage(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        set_wallet(transport, COINS, [10**21, 10**9, 10**9], [MAX_UINT256] * 3)
        transport.set_call(POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), 100 * 10**18)

        await pool.deposit(["100", "100", "100"], slippage="1")

        assert transport.sent[-1].data == encode_function_calldata(
            "add_liquidity(uint256[3],uint256)", (DEPOSIT_AMOUNTS, 99 * 10**18)
        )

    @pytest.mark.parametrize("slippage", ["100", "-1", "abc"])
    async def test_execute_rejects_invalid_slippage(
        self, pool: CurvePool, transport: FakeTransport, slippage: str
    ) -> None:
        with pytest.raises(InvalidSlippage):
            await pool.deposit(["100", "100", "100"], slippage=slippage)
        assert transport.batches == []

    async def test_execute_checks_balances_first(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        set_wallet(transport, COINS, [50 * 10**18, 10**9, 10**9], [0, 0, 0])

        with pytest.raises(InsufficientBalance) as exc_info:
            await pool.deposit(["100", "100", "100"])

        assert exc_info.value.coin == "DAI"
        assert exc_info.value.balance == "50"
        assert exc_info.value.amount == "100"
        assert exc_info.value.message == (
            "3pool pool deposit: Not enough DAI. Actual: 50, required: 100"
        )
        assert transport.sent == []

    async def test_execute_requires_signer(self, transport: FakeTransport) -> None:
        pool = assemble(transport, signer=None)
        with pytest.raises(MissingSigner):
            await pool.deposit(["1", "1", "1"])

    async def test_estimate_requires_allowance(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        set_wallet(transport, COINS, [10**21, 10**9, 10**9], [0, MAX_UINT256, MAX_UINT256])
        transport.set_call(POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), 299 * 10**18)

        with pytest.raises(InsufficientAllowanceForEstimate) as exc_info:
            await pool.estimate_gas.deposit(["100", "100", "100"])
        assert exc_info.value.coins == (DAI,)
        assert exc_info.value.method == "deposit"
        assert exc_info.value.pool_name == "3pool"
        assert transport.estimated == []

    async def test_estimate(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_wallet(transport, COINS, [10**21, 10**9, 10**9], [MAX_UINT256] * 3)
        transport.set_call(POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), 299 * 10**18)

        assert await pool.estimate_gas.deposit(["100", "100", "100"]) == DEFAULT_GAS
        assert transport.sent == []
        # The estimate uses the estimate slippage of 0.1%
        assert transport.estimated[-1].data == encode_function_calldata(
            "add_liquidity(uint256[3],uint256)", (DEPOSIT_AMOUNTS, 298_701_000_000_000_000_000)
        )

    async def test_estimate_on_rollup(self) -> None:
        transport = FakeTransport(chain_id=8453)
        pool = assemble(transport)
        set_wallet(transport, COINS, [10**21, 10**9, 10**9], [MAX_UINT256] * 3)
        transport.set_call(POOL_ADDRESS, CALC_TOKEN_AMOUNT, (DEPOSIT_AMOUNTS, True), 299 * 10**18)

        assert await pool.estimate_gas.deposit(["100", "100", "100"]) == (
            DEFAULT_GAS,
            DEFAULT_L1_DATA_GAS,
        )

    async def test_approval_helpers(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_wallet(transport, COINS, [0, 0, 0], [0, 5, MAX_UINT256])

        assert not await pool.deposit_is_approved(["100", "100", "100"])
        assert await pool.deposit_is_approved(["0", "0.000005", "100"])
        assert await pool.estimate_gas.deposit_approve(["100", "100", "100"]) == 3 * DEFAULT_GAS
        assert transport.sent == []

        hashes = await pool.deposit_approve(["100", "100", "100"])
        assert len(hashes) == 3
        assert transport.sent_selectors() == [APPROVE] * 3

    async def test_balanced_amounts(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_reserves(transport, [1000 * 10**18, 2000 * 10**6, 1000 * 10**6], 4000 * 10**18)
        set_wallet(transport, COINS, [100 * 10**18, 50 * 10**6, 1000 * 10**6], [0, 0, 0])

        assert await pool.deposit_balanced_amounts() == ["25", "50", "25"]
        # Reserves and wallet balances come from one snapshot
        assert len(transport.batches) == 1

    async def test_bonus(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_reserves(transport, [1000 * 10**18, 1000 * 10**6, 1000 * 10**6], 3000 * 10**18)
        transport.set_call(
            POOL_ADDRESS, CALC_TOKEN_AMOUNT, ([100 * 10**18, 0, 0], True), 99 * 10**18
        )
        transport.set_call(
            POOL_ADDRESS,
            CALC_TOKEN_AMOUNT,
            ([33_333_333_333_333_333_333, 33_333_333, 33_333_333], True),
            100 * 10**18,
        )

        bonus = await pool.deposit_bonus(["100", "0", "0"])

        assert Decimal(bonus).quantize(Decimal("0.0001")) == Decimal("-1.0101")

    async def test_wrapped_form_is_unsupported(self, pool: CurvePool) -> None:
        with pytest.raises(UnsupportedOperationForPoolShape) as exc_info:
            await pool.deposit_wrapped_expected(["1", "1", "1"])
        assert exc_info.value.method == "deposit_wrapped_expected"

        with pytest.raises(UnsupportedOperationForPoolShape):
            await pool.deposit_wrapped(["1", "1", "1"])
        with pytest.raises(UnsupportedOperationForPoolShape):
            await pool.estimate_gas.deposit_wrapped(["1", "1", "1"])


class TestWithdraw:
    async def test_expected(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_reserves(transport, [1000 * 10**18, 1000 * 10**6, 1000 * 10**6], 3000 * 10**18)
        assert await pool.withdraw_expected("30") == ["10", "10", "10"]

    async def test_expected_from_empty_pool(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        set_reserves(transport, [0, 0, 0], 0)
        assert await pool.withdraw_expected("30") == ["0", "0", "0"]

    async def test_no_approval_needed(self, pool: CurvePool, transport: FakeTransport) -> None:
        assert await pool.withdraw_is_approved("30")
        assert await pool.withdraw_approve("30") == []
        assert await pool.estimate_gas.withdraw_approve("30") == 0
        assert transport.batches == []

    async def test_execute(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_reserves(transport, [1000 * 10**18, 1000 * 10**6, 1000 * 10**6], 3000 * 10**18)
        set_wallet(transport, (LP_TOKEN,), [30 * 10**18], [0])

        await pool.withdraw("30")

        (withdraw,) = transport.sent
        assert withdraw.to == POOL_ADDRESS
        assert withdraw.data == encode_function_calldata(
            "remove_liquidity(uint256,uint256[3])",
            (30 * 10**18, [9_950_000_000_000_000_000, 9_950_000, 9_950_000]),
        )

    async def test_execute_checks_lp_balance(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        set_wallet(transport, (LP_TOKEN,), [10**18], [0])

        with pytest.raises(InsufficientBalance) as exc_info:
            await pool.withdraw("30")

        assert exc_info.value.coin == "3pool LP token"
        assert exc_info.value.method == "withdraw"
        assert transport.sent == []

    async def test_estimate_needs_no_allowance(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        set_reserves(transport, [1000 * 10**18, 1000 * 10**6, 1000 * 10**6], 3000 * 10**18)
        set_wallet(transport, (LP_TOKEN,), [30 * 10**18], [0])
        assert await pool.estimate_gas.withdraw("30") == DEFAULT_GAS


class TestWithdrawImbalance:
    AMOUNTS = [10 * 10**18, 10 * 10**6, 10 * 10**6]

    async def test_expected(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(
            POOL_ADDRESS, CALC_TOKEN_AMOUNT, (self.AMOUNTS, False), 30_100_000_000_000_000_000
        )
        assert await pool.withdraw_imbalance_expected(["10", "10", "10"]) == "30.1"

    async def test_execute_uses_max_burn(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        transport.set_call(
            POOL_ADDRESS, CALC_TOKEN_AMOUNT, (self.AMOUNTS, False), 30_100_000_000_000_000_000
        )
        set_wallet(transport, (LP_TOKEN,), [31 * 10**18], [0])

        await pool.withdraw_imbalance(["10", "10", "10"])

        # 0.5% above 30.1 LP
        (withdraw,) = transport.sent
        assert withdraw.data == encode_function_calldata(
            "remove_liquidity_imbalance(uint256[3],uint256)",
            (self.AMOUNTS, 30_250_500_000_000_000_000),
        )

    async def test_lp_balance_must_cover_burn_limit(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        transport.set_call(
            POOL_ADDRESS, CALC_TOKEN_AMOUNT, (self.AMOUNTS, False), 30_100_000_000_000_000_000
        )
        set_wallet(transport, (LP_TOKEN,), [30_200_000_000_000_000_000], [0])

        with pytest.raises(InsufficientBalance):
            await pool.withdraw_imbalance(["10", "10", "10"])

    async def test_bonus(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(POOL_ADDRESS, CALC_TOKEN_AMOUNT, (self.AMOUNTS, False), 30 * 10**18)
        set_reserves(transport, [1000 * 10**18, 1000 * 10**6, 1000 * 10**6], 3000 * 10**18)
        # Proportional withdrawal of the same LP gives 10 of each coin
        assert Decimal(await pool.withdraw_imbalance_bonus(["10", "10", "10"])) == 0


class TestWithdrawOneCoin:
    async def test_expected(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(
            POOL_ADDRESS, "calc_withdraw_one_coin(uint256,int128)", (10 * 10**18, 1), 9_990_000
        )
        assert await pool.withdraw_one_coin_expected("10", "USDC") == "9.99"

    async def test_execute(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(
            POOL_ADDRESS, "calc_withdraw_one_coin(uint256,int128)", (10 * 10**18, 1), 9_990_000
        )
        set_wallet(transport, (LP_TOKEN,), [10 * 10**18], [0])

        await pool.withdraw_one_coin("10", USDC)

        (withdraw,) = transport.sent
        assert withdraw.data == encode_function_calldata(
            "remove_liquidity_one_coin(uint256,int128,uint256)", (10 * 10**18, 1, 9_940_050)
        )

    async def test_bonus(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(
            POOL_ADDRESS, "calc_withdraw_one_coin(uint256,int128)", (30 * 10**18, 0), 27 * 10**18
        )
        set_reserves(transport, [1000 * 10**18, 1000 * 10**6, 1000 * 10**6], 3000 * 10**18)
        assert Decimal(await pool.withdraw_one_coin_bonus("30", "DAI")) == -10


class TestSwap:
    GET_DY = "get_dy(int128,int128,uint256)"

    async def test_expected(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(POOL_ADDRESS, self.GET_DY, (0, 1, 100 * 10**18), 99_950_000)
        assert await pool.swap_expected("DAI", "USDC", "100") == "99.95"

    async def test_same_coin(self, pool: CurvePool) -> None:
        with pytest.raises(SameCoinSwap):
            await pool.swap_expected("DAI", DAI, "1")

    async def test_price_impact(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(POOL_ADDRESS, self.GET_DY, (0, 1, 1000 * 10**18), 990 * 10**6)
        transport.set_call(POOL_ADDRESS, self.GET_DY, (0, 1, 10**18), 10**6)

        assert await pool.swap_price_impact(0, 1, "1000") == "1"
        assert len(transport.batches) == 1

    async def test_price_impact_of_dust(self, pool: CurvePool, transport: FakeTransport) -> None:
        assert await pool.swap_price_impact("USDC", "USDT", "0.000001") == "0"
        assert transport.batches == []

    async def test_execute(self, pool: CurvePool, transport: FakeTransport) -> None:
        transport.set_call(POOL_ADDRESS, self.GET_DY, (0, 1, 100 * 10**18), 99_950_000)
        set_wallet(transport, (DAI,), [100 * 10**18], [MAX_UINT256])

        await pool.swap("DAI", "USDC", "100")

        (swap,) = transport.sent
        assert swap.value == 0
        assert swap.gas == 130_000
        assert swap.data == encode_function_calldata(
            "exchange(int128,int128,uint256,uint256)", (0, 1, 100 * 10**18, 99_450_250)
        )

    async def test_execute_approves_input_coin(
        self, pool: CurvePool, transport: FakeTransport
    ) -> None:
        transport.set_call(POOL_ADDRESS, self.GET_DY, (2, 1, 10**6), 999_000)
        set_wallet(transport, (USDT,), [10**6], [0])

        await pool.swap(2, 1, "1")

        assert transport.sent_selectors() == [
            APPROVE,
            function_selector("exchange(int128,int128,uint256,uint256)"),
        ]
        assert transport.sent[0].to == USDT

    async def test_is_approved(self, pool: CurvePool, transport: FakeTransport) -> None:
        set_wallet(transport, (USDT,), [0], [10**6])
        assert await pool.swap_is_approved("USDT", "1")
        assert not await pool.swap_is_approved("USDT", "1.000001")

    async def test_wrapped_form_is_unsupported(self, pool: CurvePool) -> None:
        with pytest.raises(UnsupportedOperationForPoolShape):
            await pool.swap_wrapped_expected(0, 1, "1")
        with pytest.raises(UnsupportedOperationForPoolShape):
            await pool.estimate_gas.swap_wrapped(0, 1, "1")
