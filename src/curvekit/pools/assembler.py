from typing import TYPE_CHECKING

from curvekit.logging import logger
from curvekit.pools.descriptor import PoolDescriptor
from curvekit.pools.flags import PoolFlags, resolve_pool_flags
from curvekit.pools.interface import (
    KNOWN_IMPLEMENTATIONS,
    KNOWN_ZAPS,
    PoolInterfaces,
    resolve_contract_interface,
)
from curvekit.pools.pool import CurvePool
from curvekit.pools.strategy import select_variants

if TYPE_CHECKING:
    from curvekit.context import PoolContext


class PoolAssembler:
    """
    Builds `CurvePool` objects from the descriptors in the context's registry. Base pools of
    metapools are assembled on demand and shared between the metapools built by one assembler.
    """

    def __init__(self, context: "PoolContext") -> None:
        self.context = context
        self._pools: dict[str, CurvePool] = {}

    def resolve_interfaces(self, descriptor: PoolDescriptor) -> PoolInterfaces:
        pool_interface = resolve_contract_interface(
            pool_id=descriptor.id,
            contract="pool",
            chain_id=self.context.chain_id,
            address=descriptor.implementation,
            known_addresses=KNOWN_IMPLEMENTATIONS,
            declared_kind=descriptor.interface_kind,
            abi=descriptor.swap_abi,
            coin_count=descriptor.coin_count,
        )

        zap_interface = None
        if descriptor.zap is not None and resolve_pool_flags(descriptor).has_zap:
            zap_interface = resolve_contract_interface(
                pool_id=descriptor.id,
                contract="zap",
                chain_id=self.context.chain_id,
                address=descriptor.zap,
                known_addresses=KNOWN_ZAPS,
                declared_kind=descriptor.zap_interface_kind,
                abi=descriptor.zap_abi,
                coin_count=descriptor.underlying_coin_count,
            )

        return PoolInterfaces(pool=pool_interface, zap=zap_interface)

    def assemble(self, pool_id: str) -> CurvePool:
        try:
            return self._pools[pool_id]
        except KeyError:
            pass

        descriptor = self.context.registry.get(pool_id)
        interfaces = self.resolve_interfaces(descriptor)
        flags = resolve_pool_flags(descriptor, interfaces.pool)

        base_pool: CurvePool | None = None
        base_flags: PoolFlags | None = None
        if descriptor.base_pool is not None:
            base_pool = self.assemble(descriptor.base_pool)
            base_flags = base_pool.flags

        variants = select_variants(
            descriptor, flags, interfaces, self.context.chain_id, base_flags
        )
        pool = CurvePool(
            context=self.context,
            descriptor=descriptor,
            flags=flags,
            interfaces=interfaces,
            variants=variants,
            base_pool=base_pool,
        )
        logger.debug(f"Assembled {pool_id} pool at {descriptor.address}: {flags}")
        self._pools[pool_id] = pool
        return pool
