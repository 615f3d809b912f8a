import pytest

from curvekit.exceptions import UnknownPoolInterface
from curvekit.pools.interface import (
    CAPABILITY_TABLE,
    KNOWN_IMPLEMENTATIONS,
    ContractInterface,
    resolve_contract_interface,
)
from tests.conftest import address

STABLE_PLAIN_IMPLEMENTATION = address(0x6523AC15EC152CB70A334230F6C5D62C5BD963F1)

SWAP_ABI = (
    {
        "type": "function",
        "name": "add_liquidity",
        "inputs": [{"type": "uint256[2]"}, {"type": "uint256"}],
    },
    {
        "type": "function",
        "name": "exchange",
        "inputs": [
            {"type": "int128"},
            {"type": "int128"},
            {"type": "uint256"},
            {"type": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "swap",
        "inputs": [
            {
                "type": "tuple[]",
                "components": [{"type": "address"}, {"type": "uint256"}],
            }
        ],
    },
    {"type": "event", "name": "TokenExchange", "inputs": []},
)


def _resolve(**overrides: object) -> ContractInterface:
    arguments = {
        "pool_id": "pool",
        "contract": "pool",
        "chain_id": 1,
        "address": None,
        "known_addresses": KNOWN_IMPLEMENTATIONS,
        "declared_kind": None,
        "abi": None,
        "coin_count": 2,
    } | overrides
    return resolve_contract_interface(**arguments)  # type: ignore[arg-type]


def test_from_kind_substitutes_coin_count() -> None:
    interface = ContractInterface.from_kind("stable-plain", 3)
    assert "add_liquidity(uint256[3],uint256)" in interface
    assert "calc_token_amount(uint256[3],bool)" in interface
    assert not any("{n}" in signature for signature in interface.signatures)


def test_every_table_entry_is_well_formed() -> None:
    for kind, signatures in CAPABILITY_TABLE.items():
        assert signatures, kind
        for signature in signatures:
            assert signature.count("(") == 1, signature
            assert signature.endswith(")"), signature


def test_overloads_are_ordered_by_argument_count() -> None:
    interface = ContractInterface.from_kind("crypto-v1", 2)
    assert interface.overloads("add_liquidity") == [
        "add_liquidity(uint256[2],uint256)",
        "add_liquidity(uint256[2],uint256,bool)",
    ]
    assert interface.signature("exchange", 5) == "exchange(uint256,uint256,uint256,uint256,bool)"
    assert interface.signature("exchange", 6) is None
    assert interface.has_function("get_dy")
    assert not interface.has_function("get_dy_underlying")


def test_flagged_overloads() -> None:
    crypto = ContractInterface.from_kind("crypto-v1", 2)
    assert crypto.has_flagged_overload("add_liquidity", 2)
    assert crypto.has_flagged_overload("remove_liquidity_one_coin", 3)
    assert not crypto.has_flagged_overload("exchange_underlying", 4)

    # A trailing receiver address is not a use-underlying flag
    ng = ContractInterface.from_kind("stable-ng-plain", 2)
    assert not ng.has_flagged_overload("add_liquidity", 2)


def test_known_implementation_takes_priority() -> None:
    interface = _resolve(address=STABLE_PLAIN_IMPLEMENTATION, declared_kind="crypto-v1")
    assert interface.kind == "stable-plain"


def test_implementation_is_chain_specific() -> None:
    interface = _resolve(
        chain_id=137, address=STABLE_PLAIN_IMPLEMENTATION, declared_kind="crypto-v1"
    )
    assert interface.kind == "crypto-v1"


def test_declared_kind() -> None:
    assert _resolve(declared_kind="stable-lending").kind == "stable-lending"


def test_unknown_declared_kind() -> None:
    with pytest.raises(UnknownPoolInterface):
        _resolve(declared_kind="stable-v9")


def test_abi_fallback() -> None:
    interface = _resolve(abi=SWAP_ABI)
    assert interface.kind == "abi"
    assert interface.signatures == frozenset(
        {
            "add_liquidity(uint256[2],uint256)",
            "exchange(int128,int128,uint256,uint256)",
            "swap((address,uint256)[])",
        }
    )


def test_capability_table_wins_over_abi() -> None:
    assert _resolve(declared_kind="stable-plain", abi=SWAP_ABI).kind == "stable-plain"


def test_unresolvable_interface() -> None:
    with pytest.raises(UnknownPoolInterface) as exc_info:
        _resolve(pool_id="mystery", contract="zap")
    assert exc_info.value.pool_id == "mystery"
    assert exc_info.value.contract == "zap"
