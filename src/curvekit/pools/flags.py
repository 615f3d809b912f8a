import dataclasses

from curvekit.constants import HISTORICAL_META_FACTORY_ZAP, ZERO_ADDRESS
from curvekit.pools.descriptor import PoolDescriptor
from curvekit.pools.interface import ContractInterface

NG_INTERFACE_KINDS = frozenset(
    {"stable-ng-plain", "stable-ng-meta", "twocrypto-ng", "tricrypto-ng"}
)


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class PoolFlags:
    """
    Capability flags for a pool, derived once at construction. `has_zap` is tracked separately from
    `is_meta` because some non-meta pools (e.g. legacy lending pools) route through a zap.
    """

    is_plain: bool
    is_lending: bool
    is_meta: bool
    is_crypto: bool
    is_fake: bool
    is_factory: bool
    is_meta_factory: bool
    is_ng: bool
    has_zap: bool


def _uses_uint256_indices(interface: ContractInterface) -> bool:
    return "get_dy(uint256,uint256,uint256)" in interface


def resolve_pool_flags(
    descriptor: PoolDescriptor,
    pool_interface: ContractInterface | None = None,
) -> PoolFlags:
    """
    Derive the flags for a pool. Pure: identical inputs give identical flags.

    The descriptor is authoritative. The interface settles `is_crypto` and `is_ng` when the
    descriptor does not set them.
    """

    has_zap = descriptor.zap is not None and descriptor.zap != ZERO_ADDRESS

    is_lending = descriptor.is_lending
    if descriptor.use_lending and not any(descriptor.use_lending):
        is_lending = False

    is_crypto = descriptor.is_crypto
    is_ng = descriptor.is_ng
    if pool_interface is not None:
        is_crypto = is_crypto or _uses_uint256_indices(pool_interface)
        is_ng = is_ng or pool_interface.kind in NG_INTERFACE_KINDS

    return PoolFlags(
        is_plain=descriptor.is_plain,
        is_lending=is_lending,
        is_meta=descriptor.is_meta,
        is_crypto=is_crypto,
        is_fake=descriptor.is_fake,
        is_factory=descriptor.is_factory,
        is_meta_factory=(descriptor.is_meta and descriptor.is_factory)
        or descriptor.zap == HISTORICAL_META_FACTORY_ZAP,
        is_ng=is_ng,
        has_zap=has_zap,
    )
