from curvekit.constants import HISTORICAL_META_FACTORY_ZAP, ZERO_ADDRESS
from curvekit.pools.flags import resolve_pool_flags
from curvekit.pools.interface import ContractInterface
from tests.conftest import ZAP, three_pool_descriptor


def test_plain_pool() -> None:
    flags = resolve_pool_flags(three_pool_descriptor())
    assert flags.is_plain
    assert not flags.is_lending
    assert not flags.is_meta
    assert not flags.is_crypto
    assert not flags.is_meta_factory
    assert not flags.has_zap


def test_zap_presence() -> None:
    assert resolve_pool_flags(three_pool_descriptor(zap=ZAP)).has_zap
    assert not resolve_pool_flags(three_pool_descriptor(zap=ZERO_ADDRESS)).has_zap


def test_lending_requires_a_lending_coin() -> None:
    descriptor = three_pool_descriptor(is_lending=True, use_lending=(False, False, False))
    assert not resolve_pool_flags(descriptor).is_lending

    descriptor = three_pool_descriptor(is_lending=True, use_lending=(True, True, False))
    assert resolve_pool_flags(descriptor).is_lending


def test_meta_factory() -> None:
    meta = three_pool_descriptor(is_plain=False, is_meta=True, base_pool="3pool")
    assert not resolve_pool_flags(meta).is_meta_factory
    assert resolve_pool_flags(meta.with_overrides(is_factory=True)).is_meta_factory
    # Pools served by the historical meta factory zap count as meta factory pools
    assert resolve_pool_flags(meta.with_overrides(zap=HISTORICAL_META_FACTORY_ZAP)).is_meta_factory


def test_interface_settles_crypto_and_ng() -> None:
    descriptor = three_pool_descriptor(is_plain=False)

    crypto = resolve_pool_flags(descriptor, ContractInterface.from_kind("crypto-v1", 3))
    assert crypto.is_crypto
    assert not crypto.is_ng

    ng = resolve_pool_flags(descriptor, ContractInterface.from_kind("tricrypto-ng", 3))
    assert ng.is_crypto
    assert ng.is_ng

    stable_ng = resolve_pool_flags(descriptor, ContractInterface.from_kind("stable-ng-plain", 3))
    assert not stable_ng.is_crypto
    assert stable_ng.is_ng


def test_resolution_is_pure() -> None:
    descriptor = three_pool_descriptor(zap=ZAP)
    interface = ContractInterface.from_kind("stable-plain", 3)
    assert resolve_pool_flags(descriptor, interface) == resolve_pool_flags(descriptor, interface)
