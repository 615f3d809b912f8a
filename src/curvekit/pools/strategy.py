"""
Decision table mapping pool flags to one operation variant per family.

Each family is resolved with the same priority order:

1. swap only: the pool exposes the 5-argument exchange with a use-underlying flag
2. meta factory pools: calls go through the shared zap, qualified with the pool address
3. a zap exists (and the pool is not excluded from zap routing): calls go through the zap
4. the pool's own function: a longer-than-plain argument list means a trailing use-underlying flag

Selection is pure. It reads only the descriptor, the flags and the resolved interfaces.
"""

import dataclasses
from decimal import Decimal

from curvekit.constants import (
    LEGACY_SWAP_GAS_MULTIPLIER,
    META_FACTORY_SWAP_GAS_MULTIPLIER,
    WITHDRAW_IMBALANCE_GAS_MULTIPLIER,
    WITHDRAW_ONE_COIN_GAS_MULTIPLIER,
    ZAP_EXCLUDED_POOL_IDS,
)
from curvekit.logging import logger
from curvekit.pools.descriptor import PoolDescriptor
from curvekit.pools.flags import PoolFlags
from curvekit.pools.interface import ContractInterface, PoolInterfaces
from curvekit.pools.variants import (
    FAMILY_FUNCTIONS,
    CallTarget,
    OperationFamily,
    OperationVariant,
    OperationVariants,
    VariantKind,
    unsupported,
)
from curvekit.types.aliases import ChainId

NATIVE_EXCHANGE_SIGNATURE = "exchange(uint256,uint256,uint256,uint256,bool)"

# Gnosis tricrypto exposes the 5-argument exchange but must not be routed through it
NATIVE_EXCHANGE_EXCLUSIONS: frozenset[tuple[ChainId, str]] = frozenset({(100, "tricrypto")})

# Legacy pools that need a larger gas limit
LEGACY_GAS_OVERRIDE_POOLS: frozenset[tuple[ChainId, str]] = frozenset({(137, "ren")})


class StrategyRegistry:
    """
    Selects the variants for a pool. An instance holds no state beyond its inputs, so selecting
    twice for the same pool gives equal results.
    """

    def __init__(
        self,
        descriptor: PoolDescriptor,
        flags: PoolFlags,
        interfaces: PoolInterfaces,
        chain_id: ChainId,
        base_flags: PoolFlags | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.flags = flags
        self.interfaces = interfaces
        self.chain_id = chain_id
        self.base_flags = base_flags

    @property
    def _pool(self) -> ContractInterface:
        return self.interfaces.pool

    @property
    def _uses_zap(self) -> bool:
        return self.flags.has_zap and self.descriptor.id not in ZAP_EXCLUDED_POOL_IDS

    @property
    def _legacy_gas_override(self) -> bool:
        return (self.chain_id, self.descriptor.id) in LEGACY_GAS_OVERRIDE_POOLS

    def _has_flagged_form(self, family: OperationFamily) -> bool:
        function, plain_argument_count = FAMILY_FUNCTIONS[family]
        return self._pool.has_flagged_overload(function, plain_argument_count)

    def _zap_has_flagged_form(self, family: OperationFamily) -> bool:
        function, plain_argument_count = FAMILY_FUNCTIONS[family]
        if self.interfaces.zap is None:
            return False
        return self.interfaces.zap.has_flagged_overload(function, plain_argument_count)

    def _meta_factory(self, family: OperationFamily) -> OperationVariant:
        function, _ = FAMILY_FUNCTIONS[family]
        return OperationVariant(
            family=family,
            kind=(
                VariantKind.CRYPTO_META_FACTORY
                if self.flags.is_crypto
                else VariantKind.META_FACTORY
            ),
            target=CallTarget.ZAP,
            function=function,
            pool_qualified=True,
            underlying_flag=True if self.flags.is_crypto else None,
        )

    def _zap(self, family: OperationFamily, *, flagged: bool = False) -> OperationVariant:
        function, _ = FAMILY_FUNCTIONS[family]
        return OperationVariant(
            family=family,
            kind=VariantKind.ZAP,
            target=CallTarget.ZAP,
            function=function,
            underlying_flag=True if flagged else None,
        )

    def _direct(self, family: OperationFamily, **overrides: Decimal) -> OperationVariant:
        function, _ = FAMILY_FUNCTIONS[family]
        if self._has_flagged_form(family):
            variant = OperationVariant(
                family=family,
                kind=VariantKind.LENDING_OR_CRYPTO,
                function=function,
                underlying_flag=True,
            )
        else:
            variant = OperationVariant(family=family, kind=VariantKind.PLAIN, function=function)
        return dataclasses.replace(variant, **overrides)

    def _wrapped(self, family: OperationFamily) -> OperationVariant:
        function, _ = FAMILY_FUNCTIONS[family]
        if self._has_flagged_form(family):
            return OperationVariant(
                family=family,
                kind=VariantKind.WRAPPED_FLAGGED,
                function=function,
                underlying_flag=False,
            )
        return OperationVariant(family=family, kind=VariantKind.WRAPPED, function=function)

    def _has_wrapped_coins(self) -> bool:
        return not (self.flags.is_plain or self.flags.is_fake)

    def _deposit(self) -> OperationVariant:
        family = OperationFamily.DEPOSIT
        if self.flags.is_meta_factory:
            return self._meta_factory(family)
        if self._uses_zap:
            return self._zap(family)
        return self._direct(family)

    def _deposit_wrapped(self) -> OperationVariant:
        family = OperationFamily.DEPOSIT_WRAPPED
        if not self._has_wrapped_coins():
            return unsupported(family)
        return self._wrapped(family)

    def _withdraw(self) -> OperationVariant:
        family = OperationFamily.WITHDRAW
        if self.flags.is_meta_factory:
            return self._meta_factory(family)
        if self._uses_zap:
            return self._zap(family, flagged=self._zap_has_flagged_form(family))
        return self._direct(family)

    def _withdraw_wrapped(self) -> OperationVariant:
        family = OperationFamily.WITHDRAW_WRAPPED
        if not self._has_wrapped_coins():
            return unsupported(family)
        return self._wrapped(family)

    def _withdraw_imbalance(self) -> OperationVariant:
        family = OperationFamily.WITHDRAW_IMBALANCE
        if self.flags.is_crypto:
            return unsupported(family)
        if self.flags.is_meta_factory:
            return self._meta_factory(family)
        if self._uses_zap:
            return self._zap(family)
        if self._has_flagged_form(family) and self._legacy_gas_override:
            return self._direct(family, gas_multiplier=WITHDRAW_IMBALANCE_GAS_MULTIPLIER)
        return self._direct(family)

    def _withdraw_imbalance_wrapped(self) -> OperationVariant:
        family = OperationFamily.WITHDRAW_IMBALANCE_WRAPPED
        if self.flags.is_crypto or not self._has_wrapped_coins():
            return unsupported(family)
        return self._wrapped(family)

    def _withdraw_one_coin(self) -> OperationVariant:
        family = OperationFamily.WITHDRAW_ONE_COIN
        if self.flags.is_meta_factory:
            return self._meta_factory(family)
        if self._uses_zap or (self.flags.is_crypto and self.flags.is_meta and self.flags.has_zap):
            return self._zap(family)
        if self._has_flagged_form(family) and self._legacy_gas_override:
            return self._direct(family, gas_multiplier=WITHDRAW_ONE_COIN_GAS_MULTIPLIER)
        return self._direct(family)

    def _withdraw_one_coin_wrapped(self) -> OperationVariant:
        family = OperationFamily.WITHDRAW_ONE_COIN_WRAPPED
        # Lending pools served by a zap cannot pay out a single wrapped coin
        if not self._has_wrapped_coins() or (self.flags.is_lending and self.flags.has_zap):
            return unsupported(family)
        return self._wrapped(family)

    def _swap(self) -> OperationVariant:
        family = OperationFamily.SWAP
        if (
            NATIVE_EXCHANGE_SIGNATURE in self._pool
            and (self.chain_id, self.descriptor.id) not in NATIVE_EXCHANGE_EXCLUSIONS
        ):
            return OperationVariant(
                family=family,
                kind=VariantKind.NATIVE,
                function="exchange",
                underlying_flag=True,
            )

        base_lending = self.base_flags is not None and self.base_flags.is_lending
        base_fake = self.base_flags is not None and self.base_flags.is_fake
        if self.flags.is_meta_factory and (base_lending or base_fake or self.flags.is_crypto):
            return OperationVariant(
                family=family,
                kind=VariantKind.CRYPTO_META_FACTORY
                if self.flags.is_crypto
                else VariantKind.META_FACTORY,
                target=CallTarget.ZAP,
                function="exchange",
                pool_qualified=True,
                underlying_flag=True if self.flags.is_crypto else None,
                gas_multiplier=META_FACTORY_SWAP_GAS_MULTIPLIER,
            )

        target = CallTarget.POOL
        interface = self._pool
        if self.flags.is_crypto and self.flags.is_meta and self.interfaces.zap is not None:
            target = CallTarget.ZAP
            interface = self.interfaces.zap

        return OperationVariant(
            family=family,
            kind=VariantKind.ZAP if target is CallTarget.ZAP else VariantKind.PLAIN,
            target=target,
            function="exchange_underlying"
            if interface.has_function("exchange_underlying")
            else "exchange",
            gas_multiplier=LEGACY_SWAP_GAS_MULTIPLIER if self._legacy_gas_override else None,
        )

    def _swap_wrapped(self) -> OperationVariant:
        family = OperationFamily.SWAP_WRAPPED
        if not self._has_wrapped_coins():
            return unsupported(family)
        if NATIVE_EXCHANGE_SIGNATURE in self._pool:
            return OperationVariant(
                family=family,
                kind=VariantKind.WRAPPED_FLAGGED,
                function="exchange",
                underlying_flag=False,
            )
        return OperationVariant(family=family, kind=VariantKind.WRAPPED, function="exchange")

    def select(self) -> OperationVariants:
        variants = OperationVariants(
            deposit=self._deposit(),
            deposit_wrapped=self._deposit_wrapped(),
            withdraw=self._withdraw(),
            withdraw_wrapped=self._withdraw_wrapped(),
            withdraw_imbalance=self._withdraw_imbalance(),
            withdraw_imbalance_wrapped=self._withdraw_imbalance_wrapped(),
            withdraw_one_coin=self._withdraw_one_coin(),
            withdraw_one_coin_wrapped=self._withdraw_one_coin_wrapped(),
            swap=self._swap(),
            swap_wrapped=self._swap_wrapped(),
        )
        for family in OperationFamily:
            logger.debug(f"{self.descriptor.id}: {family} -> {variants[family].kind}")
        return variants


def select_variants(
    descriptor: PoolDescriptor,
    flags: PoolFlags,
    interfaces: PoolInterfaces,
    chain_id: ChainId,
    base_flags: PoolFlags | None = None,
) -> OperationVariants:
    return StrategyRegistry(descriptor, flags, interfaces, chain_id, base_flags).select()
