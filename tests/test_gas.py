from decimal import Decimal

import pytest

from curvekit.gas import GasEstimate, GasEstimator, apply_gas_multiplier, sum_estimates
from curvekit.transport.base import TransactionRequest
from tests.conftest import DEFAULT_GAS, DEFAULT_L1_DATA_GAS, SIGNER, FakeTransport, address


def _transaction() -> TransactionRequest:
    return TransactionRequest(sender=SIGNER, to=address(1), data=b"\x12\x34\x56\x78")


def test_apply_gas_multiplier_rounds_up() -> None:
    assert apply_gas_multiplier(100_000, Decimal("1.3")) == 130_000
    assert apply_gas_multiplier(100_001, Decimal("1.3")) == 130_002
    assert apply_gas_multiplier(100_000, Decimal(1)) == 100_000


def test_estimate_value() -> None:
    assert GasEstimate(21_000).value == 21_000
    assert GasEstimate(21_000, 1_500).value == (21_000, 1_500)


def test_estimate_addition() -> None:
    assert (GasEstimate(1) + GasEstimate(2)).value == 3
    assert (GasEstimate(1, 10) + GasEstimate(2, 20)).value == (3, 30)
    assert GasEstimate(5, 7).doubled().value == (10, 14)


def test_sum_estimates() -> None:
    assert sum_estimates([], rollup=False).value == 0
    assert sum_estimates([], rollup=True).value == (0, 0)
    assert sum_estimates([GasEstimate(1), GasEstimate(2)], rollup=False).value == 3


def test_gas_limit_uses_multiplier() -> None:
    estimate = GasEstimate(100_000, 50_000)
    # L1 data gas is never part of the gas limit
    assert estimate.gas_limit(Decimal("1.3")) == 130_000
    assert estimate.gas_limit(Decimal("2.0")) == 200_000


async def test_estimator_on_l1() -> None:
    estimator = GasEstimator(FakeTransport(chain_id=1), chain_id=1)
    assert not estimator.is_rollup
    estimate = await estimator.estimate(_transaction())
    assert estimate.value == DEFAULT_GAS


@pytest.mark.parametrize("chain_id", [10, 8453, 252, 5000])
async def test_estimator_on_rollups(chain_id: int) -> None:
    estimator = GasEstimator(FakeTransport(chain_id=chain_id), chain_id=chain_id)
    assert estimator.is_rollup
    estimate = await estimator.estimate(_transaction())
    assert estimate.value == (DEFAULT_GAS, DEFAULT_L1_DATA_GAS)


def test_estimator_gas_limit() -> None:
    estimator = GasEstimator(FakeTransport(), chain_id=1, default_multiplier=Decimal("1.5"))
    assert estimator.gas_limit(GasEstimate(10_000)) == 15_000
    assert estimator.gas_limit(GasEstimate(10_000), Decimal(2)) == 20_000
