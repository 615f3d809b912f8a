import dataclasses
from decimal import Decimal
from typing import Self

from curvekit.constants import DEFAULT_GAS_MULTIPLIER, ROLLUP_CHAIN_IDS
from curvekit.math.decimal_math import to_integer
from curvekit.transport.base import AbstractContractTransport, TransactionRequest
from curvekit.types.aliases import ChainId, GasAmount


def apply_gas_multiplier(raw_estimate: int, multiplier: Decimal) -> int:
    """
    Return `ceil(raw_estimate * multiplier)`.
    """

    return to_integer(Decimal(raw_estimate) * multiplier, round_up=True)


@dataclasses.dataclass(slots=True, frozen=True)
class GasEstimate:
    """
    A raw gas estimate. On rollups, `l1_data` holds the gas charged for posting the transaction
    data to L1; it is never part of the gas limit.
    """

    execution: int
    l1_data: int | None = None

    @property
    def value(self) -> GasAmount:
        if self.l1_data is None:
            return self.execution
        return (self.execution, self.l1_data)

    def __add__(self, other: Self) -> Self:
        if self.l1_data is None and other.l1_data is None:
            return type(self)(self.execution + other.execution)
        return type(self)(
            self.execution + other.execution,
            (self.l1_data or 0) + (other.l1_data or 0),
        )

    def doubled(self) -> Self:
        return self + self

    def gas_limit(self, multiplier: Decimal = DEFAULT_GAS_MULTIPLIER) -> int:
        return apply_gas_multiplier(self.execution, multiplier)


ZERO_GAS = GasEstimate(0)


def sum_estimates(estimates: list[GasEstimate], *, rollup: bool) -> GasEstimate:
    total = GasEstimate(0, 0) if rollup else ZERO_GAS
    for estimate in estimates:
        total += estimate
    return total


class GasEstimator:
    """
    Produces raw estimates and gas limits. Estimates returned to callers are never multiplied; the
    multiplier only sizes the gas limit of a submitted transaction.
    """

    def __init__(
        self,
        transport: AbstractContractTransport,
        chain_id: ChainId,
        default_multiplier: Decimal = DEFAULT_GAS_MULTIPLIER,
    ) -> None:
        self.transport = transport
        self.chain_id = chain_id
        self.default_multiplier = default_multiplier

    @property
    def is_rollup(self) -> bool:
        return self.chain_id in ROLLUP_CHAIN_IDS

    async def estimate(self, transaction: TransactionRequest) -> GasEstimate:
        execution = await self.transport.estimate_gas(transaction)
        if not self.is_rollup:
            return GasEstimate(execution)
        return GasEstimate(execution, await self.transport.estimate_l1_data_gas(transaction))

    def gas_limit(self, estimate: GasEstimate, multiplier: Decimal | None = None) -> int:
        return estimate.gas_limit(self.default_multiplier if multiplier is None else multiplier)
