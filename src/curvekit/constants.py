__all__ = (
    "CHILD_GAUGE_FACTORIES",
    "CRV_MINTER_ADDRESS",
    "CRV_MINTER_CHAIN_ID",
    "DEFAULT_ESTIMATE_SLIPPAGE",
    "DEFAULT_EXECUTE_SLIPPAGE",
    "DEFAULT_GAS_MULTIPLIER",
    "DELEGATED_COMPUTATION_TIMEOUT",
    "ETH_ADDRESS",
    "HISTORICAL_META_FACTORY_ZAP",
    "LEGACY_SWAP_GAS_MULTIPLIER",
    "LP_TOKEN_DECIMALS",
    "MAX_UINT256",
    "META_FACTORY_SWAP_GAS_MULTIPLIER",
    "OP_STACK_GAS_PRICE_ORACLE",
    "ROLLUP_CHAIN_IDS",
    "UNSTAKE_GAS_MULTIPLIER",
    "WITHDRAW_IMBALANCE_GAS_MULTIPLIER",
    "WITHDRAW_ONE_COIN_GAS_MULTIPLIER",
    "ZAP_EXCLUDED_POOL_IDS",
    "ZERO_ADDRESS",
)

import typing
from decimal import Decimal

from eth_typing import ChainId, ChecksumAddress

from curvekit.checksum_cache import get_checksum_address


def _max_uint(bits: int) -> int:
    return typing.cast("int", 2**bits - 1)


MAX_UINT256 = _max_uint(256)

ZERO_ADDRESS = get_checksum_address("0x0000000000000000000000000000000000000000")

# Placeholder address used by pools for the chain's native asset
ETH_ADDRESS = get_checksum_address("0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE")

# A zap at this address marks the pool as a meta factory pool even if the descriptor does not
HISTORICAL_META_FACTORY_ZAP = get_checksum_address("0xa79828df1850e8a3a3064576f380d90aecdd3359")

# Pools whose zap must not be used for deposits and withdrawals
ZAP_EXCLUDED_POOL_IDS: frozenset[str] = frozenset({"susd"})

DEFAULT_EXECUTE_SLIPPAGE = Decimal("0.5")
DEFAULT_ESTIMATE_SLIPPAGE = Decimal("0.1")

DEFAULT_GAS_MULTIPLIER = Decimal("1.3")
META_FACTORY_SWAP_GAS_MULTIPLIER = Decimal("1.4")
WITHDRAW_IMBALANCE_GAS_MULTIPLIER = Decimal("1.4")
WITHDRAW_ONE_COIN_GAS_MULTIPLIER = Decimal("1.6")
LEGACY_SWAP_GAS_MULTIPLIER = Decimal("1.6")
UNSTAKE_GAS_MULTIPLIER = Decimal("2.0")

# Chains where gas is billed as L2 execution plus L1 data posting
ROLLUP_CHAIN_IDS: frozenset[int] = frozenset(
    {
        ChainId.OETH,  # Optimism
        ChainId.BASE,
        252,  # Fraxtal
        5000,  # Mantle
    }
)
OP_STACK_GAS_PRICE_ORACLE: ChecksumAddress = get_checksum_address(
    "0x420000000000000000000000000000000000000F"
)

# The CRV minter only exists on Ethereum mainnet, other chains route through the gauge factory
CRV_MINTER_CHAIN_ID = ChainId.ETH

DELEGATED_COMPUTATION_TIMEOUT = 30

LP_TOKEN_DECIMALS = 18

CRV_MINTER_ADDRESS = get_checksum_address("0xd061D61a4d941c39E5453435B6345Dc261C2fcE0")

# CRV emissions on other chains are minted by the child gauge factory
CHILD_GAUGE_FACTORIES: dict[int, ChecksumAddress] = {
    chain_id: get_checksum_address(address)
    for chain_id, address in (
        (10, "0x871fBD4E01012e2E8457346059e8C189d664DbA4"),
        (56, "0xe35A879E5EfB4F1Bb7F70dCF3250f2e19f096bd8"),
        (100, "0x06471ED238306a427241B3eA81352244E77B004F"),
        (137, "0x55a1C26CE60490A15Bdd6bD73De4F6346525e01e"),
        (146, "0xf3A431008396df8A8b2DF492C913706BDB0874ef"),
        (196, "0xD5C3e070E121488806AaA5565283A164ACEB94Df"),
        (250, "0x004A476B5B76738E34c86C7144554B9d34402F13"),
        (252, "0x0B8D6B6CeFC7Aa1C2852442e518443B1b22e1C52"),
        (324, "0x167D9C27070Ce04b79820E6aaC0cF243d6098812"),
        (999, "0x8b3EFBEfa6eD222077455d6f0DCdA3bF4f3F57A6"),
        (1284, "0xe35A879E5EfB4F1Bb7F70dCF3250f2e19f096bd8"),
        (2222, "0xe35A879E5EfB4F1Bb7F70dCF3250f2e19f096bd8"),
        (5000, "0x0B8D6B6CeFC7Aa1C2852442e518443B1b22e1C52"),
        (8453, "0xe35A879E5EfB4F1Bb7F70dCF3250f2e19f096bd8"),
        (42161, "0x988d1037e9608B21050A8EFba0c6C45e01A3Bce7"),
        (42220, "0xe35A879E5EfB4F1Bb7F70dCF3250f2e19f096bd8"),
        (43114, "0x97aDC08FA1D849D2C48C5dcC1DaB568B169b0267"),
        (1313161554, "0xe35A879E5EfB4F1Bb7F70dCF3250f2e19f096bd8"),
    )
}
