"""
Contract interfaces for pools and zaps.

An interface is the set of function signatures a contract exposes. It is resolved once per contract
from a versioned capability table keyed by factory implementation and by archetype. Reading the
signatures from a descriptor-supplied ABI is a last-resort fallback for contracts the table does
not know.
"""

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any, Self

from eth_typing import ChecksumAddress

from curvekit.checksum_cache import get_checksum_address
from curvekit.constants import HISTORICAL_META_FACTORY_ZAP
from curvekit.exceptions.pool import UnknownPoolInterface
from curvekit.functions import (
    extract_argument_types_from_function_prototype,
    extract_function_name,
)
from curvekit.logging import logger
from curvekit.types.aliases import ChainId

CAPABILITY_TABLE_VERSION = 3

_COMMON_POOL_VIEWS = (
    "balances(uint256)",
    "coins(uint256)",
    "get_virtual_price()",
)

# Signatures use "{n}" for the coin count of fixed-size arrays
CAPABILITY_TABLE: Mapping[str, tuple[str, ...]] = {
    # Stableswap pools from the legacy plain and meta factories, and the original registry pools
    "stable-plain": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[{n}],uint256)",
        "remove_liquidity(uint256,uint256[{n}])",
        "remove_liquidity_imbalance(uint256[{n}],uint256)",
        "remove_liquidity_one_coin(uint256,int128,uint256)",
        "calc_token_amount(uint256[{n}],bool)",
        "calc_withdraw_one_coin(uint256,int128)",
        "exchange(int128,int128,uint256,uint256)",
        "get_dy(int128,int128,uint256)",
    ),
    "stable-meta": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[{n}],uint256)",
        "remove_liquidity(uint256,uint256[{n}])",
        "remove_liquidity_imbalance(uint256[{n}],uint256)",
        "remove_liquidity_one_coin(uint256,int128,uint256)",
        "calc_token_amount(uint256[{n}],bool)",
        "calc_withdraw_one_coin(uint256,int128)",
        "exchange(int128,int128,uint256,uint256)",
        "exchange_underlying(int128,int128,uint256,uint256)",
        "get_dy(int128,int128,uint256)",
        "get_dy_underlying(int128,int128,uint256)",
    ),
    # Lending pools take a trailing "use underlying" flag, e.g. aave
    "stable-lending": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[{n}],uint256,bool)",
        "remove_liquidity(uint256,uint256[{n}],bool)",
        "remove_liquidity_imbalance(uint256[{n}],uint256,bool)",
        "remove_liquidity_one_coin(uint256,int128,uint256,bool)",
        "calc_token_amount(uint256[{n}],bool)",
        "calc_withdraw_one_coin(uint256,int128)",
        "exchange(int128,int128,uint256,uint256)",
        "exchange_underlying(int128,int128,uint256,uint256)",
        "get_dy(int128,int128,uint256)",
        "get_dy_underlying(int128,int128,uint256)",
    ),
    "stable-ng-plain": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[],uint256)",
        "add_liquidity(uint256[],uint256,address)",
        "remove_liquidity(uint256,uint256[])",
        "remove_liquidity(uint256,uint256[],address)",
        "remove_liquidity_imbalance(uint256[],uint256)",
        "remove_liquidity_one_coin(uint256,int128,uint256)",
        "calc_token_amount(uint256[],bool)",
        "calc_withdraw_one_coin(uint256,int128)",
        "exchange(int128,int128,uint256,uint256)",
        "get_dy(int128,int128,uint256)",
    ),
    "stable-ng-meta": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[],uint256)",
        "add_liquidity(uint256[],uint256,address)",
        "remove_liquidity(uint256,uint256[])",
        "remove_liquidity(uint256,uint256[],address)",
        "remove_liquidity_imbalance(uint256[],uint256)",
        "remove_liquidity_one_coin(uint256,int128,uint256)",
        "calc_token_amount(uint256[],bool)",
        "calc_withdraw_one_coin(uint256,int128)",
        "exchange(int128,int128,uint256,uint256)",
        "exchange_underlying(int128,int128,uint256,uint256)",
        "get_dy(int128,int128,uint256)",
        "get_dy_underlying(int128,int128,uint256)",
    ),
    # Crypto pools index coins with uint256 and optionally accept a trailing "use eth" flag
    "crypto-v1": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[{n}],uint256)",
        "add_liquidity(uint256[{n}],uint256,bool)",
        "remove_liquidity(uint256,uint256[{n}])",
        "remove_liquidity(uint256,uint256[{n}],bool)",
        "remove_liquidity_one_coin(uint256,uint256,uint256)",
        "remove_liquidity_one_coin(uint256,uint256,uint256,bool)",
        "calc_token_amount(uint256[{n}])",
        "calc_withdraw_one_coin(uint256,uint256)",
        "exchange(uint256,uint256,uint256,uint256)",
        "exchange(uint256,uint256,uint256,uint256,bool)",
        "get_dy(uint256,uint256,uint256)",
    ),
    "twocrypto-ng": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[2],uint256)",
        "add_liquidity(uint256[2],uint256,address)",
        "remove_liquidity(uint256,uint256[2])",
        "remove_liquidity(uint256,uint256[2],address)",
        "remove_liquidity_one_coin(uint256,uint256,uint256)",
        "calc_token_amount(uint256[2],bool)",
        "calc_withdraw_one_coin(uint256,uint256)",
        "exchange(uint256,uint256,uint256,uint256)",
        "get_dy(uint256,uint256,uint256)",
    ),
    "tricrypto-ng": (
        *_COMMON_POOL_VIEWS,
        "add_liquidity(uint256[3],uint256,bool)",
        "add_liquidity(uint256[3],uint256,bool,address)",
        "remove_liquidity(uint256,uint256[3],bool)",
        "remove_liquidity_one_coin(uint256,uint256,uint256,bool)",
        "calc_token_amount(uint256[3],bool)",
        "calc_withdraw_one_coin(uint256,uint256)",
        "exchange(uint256,uint256,uint256,uint256,bool)",
        "exchange_underlying(uint256,uint256,uint256,uint256)",
        "get_dy(uint256,uint256,uint256)",
    ),
    # Zaps. "{n}" is the underlying coin count of the pool they serve.
    "deposit-zap": (
        "add_liquidity(uint256[{n}],uint256)",
        "remove_liquidity(uint256,uint256[{n}])",
        "remove_liquidity_imbalance(uint256[{n}],uint256)",
        "remove_liquidity_one_coin(uint256,int128,uint256)",
        "calc_token_amount(uint256[{n}],bool)",
        "calc_withdraw_one_coin(uint256,int128)",
    ),
    "meta-factory-zap": (
        "add_liquidity(address,uint256[{n}],uint256)",
        "add_liquidity(address,uint256[{n}],uint256,address)",
        "remove_liquidity(address,uint256,uint256[{n}])",
        "remove_liquidity(address,uint256,uint256[{n}],address)",
        "remove_liquidity_imbalance(address,uint256[{n}],uint256)",
        "remove_liquidity_one_coin(address,uint256,int128,uint256)",
        "calc_token_amount(address,uint256[{n}],bool)",
        "calc_withdraw_one_coin(address,uint256,int128)",
        "exchange(address,int128,int128,uint256,uint256)",
        "get_dy(address,int128,int128,uint256)",
    ),
    "crypto-meta-factory-zap": (
        "add_liquidity(address,uint256[{n}],uint256,bool)",
        "remove_liquidity(address,uint256,uint256[{n}],bool)",
        "remove_liquidity_one_coin(address,uint256,uint256,uint256,bool)",
        "calc_token_amount(address,uint256[{n}])",
        "calc_withdraw_one_coin(address,uint256,uint256)",
        "exchange(address,uint256,uint256,uint256,uint256,bool)",
        "get_dy(address,uint256,uint256,uint256)",
    ),
    "crypto-meta-zap": (
        "add_liquidity(uint256[{n}],uint256)",
        "remove_liquidity(uint256,uint256[{n}])",
        "remove_liquidity_one_coin(uint256,uint256,uint256)",
        "calc_token_amount(uint256[{n}])",
        "calc_withdraw_one_coin(uint256,uint256)",
        "exchange_underlying(uint256,uint256,uint256,uint256)",
        "get_dy_underlying(uint256,uint256,uint256)",
    ),
}


def _address_table(
    entries: Iterable[tuple[ChainId, str, str]],
) -> Mapping[tuple[ChainId, ChecksumAddress], str]:
    return {
        (chain_id, get_checksum_address(address)): kind for chain_id, address, kind in entries
    }


# Factory blueprints by chain. New blueprints are added here and CAPABILITY_TABLE_VERSION is bumped.
KNOWN_IMPLEMENTATIONS = _address_table(
    (
        # Ethereum
        (1, "0x6523Ac15EC152Cb70a334230F6c5d62C5Bd963f1", "stable-plain"),
        (1, "0x24D937143d3F5cF04c72bA112735151A8CAE2262", "stable-plain"),
        (1, "0x4A4d7868390EF5CaC51cDA262888f34bD3025C3F", "stable-plain"),
        (1, "0x9B52F13DF69D79Ec5aAB6D1aCe3157d29B409cC3", "stable-plain"),
        (1, "0x50b085f2e5958C4A87baf93A8AB79F6bec068494", "stable-plain"),
        (1, "0xE5F4b89E0A16578B3e0e7581327BDb4C712E44De", "stable-plain"),
        (1, "0x5Bd47eA4494e0F8DE6e3Ca10F1c05F55b72466B8", "stable-plain"),
        (1, "0xd35B58386705CE75CE6d09842E38E9BE9CDe5bF6", "stable-plain"),
        (1, "0xaD4753D045D3Aed5C1a6606dFb6a7D7AD67C1Ad7", "stable-plain"),
        (1, "0x213be373FDff327658139C7df330817DAD2d5bBE", "stable-meta"),
        (1, "0x55Aa9BF126bCABF0bDC17Fa9E39Ec9239e1ce7A9", "stable-meta"),
        (1, "0x33bB0e62d5e8C688E645Dd46DFb48Cd613250067", "stable-meta"),
        (1, "0xC6A8466d128Fbfd34AdA64a9FFFce325D57C9a52", "stable-meta"),
        (1, "0xECAaecd9d2193900b424774133B1f51ae0F29d9E", "stable-meta"),
        (1, "0x933f4769DCC27fC7345D9d5975AE48EC4D0F829C", "stable-ng-plain"),
        (1, "0xDCc91f930b42619377C200BA05b7513f2958b202", "stable-ng-plain"),
        (1, "0xDD7EBB1C49780519dD9755B8B1A23a6f42CE099E", "stable-ng-meta"),
        (1, "0xede71F77d7c900dCA5892720E76316C6E575F0F7", "stable-ng-meta"),
        # Polygon
        (137, "0x571FF5b7b346F706aa48d696a9a4a288e9Bb4091", "stable-plain"),
        (137, "0x493084cA44C779Af27a416ac1F71e3823BF21b53", "stable-plain"),
        (137, "0x991b05d5316fa3A2C053F84658b84987cd5c9970", "stable-plain"),
        (137, "0x4fb93D7d320E8A263F22f62C2059dFC2A8bCbC4c", "stable-meta"),
        (137, "0xC05EB760A135d3D0c839f1141423002681157a17", "stable-meta"),
        (137, "0xa7Ba18EeFcD9513230987eC2faB6711AF5AbD9c2", "stable-ng-plain"),
        (137, "0xe265FC390E9129b7E337Da23cD42E00C34Da2CE3", "stable-ng-plain"),
        (137, "0x7C2085419BE6a04f4ad88ea91bC9F5C6E6C463D8", "stable-ng-meta"),
        (137, "0xa7b9d886A9a374A1C86DC52d2BA585c5CDFdac26", "stable-ng-meta"),
    )
)

KNOWN_ZAPS = _address_table(
    (
        (1, HISTORICAL_META_FACTORY_ZAP, "meta-factory-zap"),
    )
)


def _abi_type(abi_input: Mapping[str, Any]) -> str:
    abi_type: str = abi_input["type"]
    if abi_type.startswith("tuple"):
        components = ",".join(_abi_type(component) for component in abi_input["components"])
        return f"({components}){abi_type.removeprefix('tuple')}"
    return abi_type


@dataclasses.dataclass(slots=True, frozen=True)
class ContractInterface:
    """
    The function signatures exposed by one contract, e.g. 'add_liquidity(uint256[3],uint256)'.
    """

    kind: str
    signatures: frozenset[str]

    @classmethod
    def from_kind(cls, kind: str, coin_count: int) -> Self:
        return cls(
            kind=kind,
            signatures=frozenset(
                signature.replace("{n}", str(coin_count)) for signature in CAPABILITY_TABLE[kind]
            ),
        )

    @classmethod
    def from_abi(cls, abi: Iterable[Mapping[str, Any]]) -> Self:
        return cls(
            kind="abi",
            signatures=frozenset(
                f"{entry['name']}({','.join(_abi_type(i) for i in entry.get('inputs', ()))})"
                for entry in abi
                if entry.get("type", "function") == "function"
            ),
        )

    def __contains__(self, signature: object) -> bool:
        return signature in self.signatures

    def overloads(self, function_name: str) -> list[str]:
        """
        All signatures of a function, shortest argument list first.
        """

        return sorted(
            (
                signature
                for signature in self.signatures
                if extract_function_name(signature) == function_name
            ),
            key=lambda signature: (
                len(extract_argument_types_from_function_prototype(signature)),
                signature,
            ),
        )

    def has_function(self, function_name: str) -> bool:
        return bool(self.overloads(function_name))

    def has_flagged_overload(self, function_name: str, plain_argument_count: int) -> bool:
        """
        True if the function has an overload taking one trailing boolean beyond its plain form,
        e.g. 'add_liquidity(uint256[2],uint256,bool)'. Trailing receiver addresses do not count.
        """

        return any(
            len(extract_argument_types_from_function_prototype(signature))
            == plain_argument_count + 1
            and signature.endswith(",bool)")
            for signature in self.overloads(function_name)
        )

    def signature(self, function_name: str, argument_count: int) -> str | None:
        for signature in self.overloads(function_name):
            if len(extract_argument_types_from_function_prototype(signature)) == argument_count:
                return signature
        return None


@dataclasses.dataclass(slots=True, frozen=True)
class PoolInterfaces:
    pool: ContractInterface
    zap: ContractInterface | None = None


def resolve_contract_interface(
    *,
    pool_id: str,
    contract: str,
    chain_id: ChainId,
    address: ChecksumAddress | None,
    known_addresses: Mapping[tuple[ChainId, ChecksumAddress], str],
    declared_kind: str | None,
    abi: Iterable[Mapping[str, Any]] | None,
    coin_count: int,
) -> ContractInterface:
    """
    Resolve an interface from the capability table, falling back to the ABI.
    """

    kind = None
    if address is not None:
        kind = known_addresses.get((chain_id, address))
    if kind is None:
        kind = declared_kind

    if kind is not None:
        if kind not in CAPABILITY_TABLE:
            raise UnknownPoolInterface(pool_id, contract)
        return ContractInterface.from_kind(kind, coin_count)

    if abi is not None:
        logger.debug(f"Resolving the {contract} interface of {pool_id} from its ABI")
        return ContractInterface.from_abi(abi)

    raise UnknownPoolInterface(pool_id, contract)
