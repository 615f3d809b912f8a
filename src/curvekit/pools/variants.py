import dataclasses
import enum
from decimal import Decimal


class OperationFamily(enum.StrEnum):
    DEPOSIT = "deposit"
    DEPOSIT_WRAPPED = "deposit_wrapped"
    WITHDRAW = "withdraw"
    WITHDRAW_WRAPPED = "withdraw_wrapped"
    WITHDRAW_IMBALANCE = "withdraw_imbalance"
    WITHDRAW_IMBALANCE_WRAPPED = "withdraw_imbalance_wrapped"
    WITHDRAW_ONE_COIN = "withdraw_one_coin"
    WITHDRAW_ONE_COIN_WRAPPED = "withdraw_one_coin_wrapped"
    SWAP = "swap"
    SWAP_WRAPPED = "swap_wrapped"

    @property
    def wrapped(self) -> bool:
        return self.value.endswith("_wrapped")


# Contract function called by each family, and the argument count of its plain form
FAMILY_FUNCTIONS: dict[OperationFamily, tuple[str, int]] = {
    OperationFamily.DEPOSIT: ("add_liquidity", 2),
    OperationFamily.DEPOSIT_WRAPPED: ("add_liquidity", 2),
    OperationFamily.WITHDRAW: ("remove_liquidity", 2),
    OperationFamily.WITHDRAW_WRAPPED: ("remove_liquidity", 2),
    OperationFamily.WITHDRAW_IMBALANCE: ("remove_liquidity_imbalance", 2),
    OperationFamily.WITHDRAW_IMBALANCE_WRAPPED: ("remove_liquidity_imbalance", 2),
    OperationFamily.WITHDRAW_ONE_COIN: ("remove_liquidity_one_coin", 3),
    OperationFamily.WITHDRAW_ONE_COIN_WRAPPED: ("remove_liquidity_one_coin", 3),
    OperationFamily.SWAP: ("exchange", 4),
    OperationFamily.SWAP_WRAPPED: ("exchange", 4),
}


class VariantKind(enum.StrEnum):
    UNSUPPORTED = "unsupported"
    # Swap through the 5-argument exchange with a trailing use-underlying flag
    NATIVE = "native"
    # Calls go to a shared zap with the pool address as the leading argument
    META_FACTORY = "meta_factory"
    CRYPTO_META_FACTORY = "crypto_meta_factory"
    ZAP = "zap"
    # Pool function takes a trailing use-underlying flag
    LENDING_OR_CRYPTO = "lending_or_crypto"
    PLAIN = "plain"
    # Wrapped-coin variants: with a trailing `False` flag, or without one
    WRAPPED_FLAGGED = "wrapped_flagged"
    WRAPPED = "wrapped"


class CallTarget(enum.StrEnum):
    POOL = "pool"
    ZAP = "zap"


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class OperationVariant:
    """
    The algorithm selected for one operation family. It fixes the target contract and the shape
    of the call: `pool_qualified` prepends the pool address, and `underlying_flag` (when not None)
    is appended as the final boolean argument.
    """

    family: OperationFamily
    kind: VariantKind
    target: CallTarget = CallTarget.POOL
    function: str = ""
    pool_qualified: bool = False
    underlying_flag: bool | None = None
    # None sizes the gas limit with the estimator's default multiplier
    gas_multiplier: Decimal | None = None

    @property
    def supported(self) -> bool:
        return self.kind is not VariantKind.UNSUPPORTED

    def arguments(self, pool_address: str, core: tuple[object, ...]) -> tuple[object, ...]:
        """
        Arrange the core arguments of a call into the shape this variant targets.
        """

        arguments = (pool_address, *core) if self.pool_qualified else core
        if self.underlying_flag is not None:
            arguments = (*arguments, self.underlying_flag)
        return arguments


def unsupported(family: OperationFamily) -> OperationVariant:
    return OperationVariant(family=family, kind=VariantKind.UNSUPPORTED)


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class OperationVariants:
    """
    One selected variant per operation family.
    """

    deposit: OperationVariant
    deposit_wrapped: OperationVariant
    withdraw: OperationVariant
    withdraw_wrapped: OperationVariant
    withdraw_imbalance: OperationVariant
    withdraw_imbalance_wrapped: OperationVariant
    withdraw_one_coin: OperationVariant
    withdraw_one_coin_wrapped: OperationVariant
    swap: OperationVariant
    swap_wrapped: OperationVariant

    def __getitem__(self, family: OperationFamily) -> OperationVariant:
        variant: OperationVariant = getattr(self, family.value)
        return variant
