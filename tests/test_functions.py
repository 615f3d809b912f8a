from eth_utils.crypto import keccak
from hexbytes import HexBytes

from curvekit.functions import (
    decode_function_result,
    encode_function_calldata,
    extract_argument_types_from_function_prototype,
    extract_function_name,
    function_selector,
)


def test_extract_argument_types_from_function_prototype():
    assert extract_argument_types_from_function_prototype("func()") == []
    assert extract_argument_types_from_function_prototype("func(uint256)") == [
        "uint256",
    ]
    assert extract_argument_types_from_function_prototype("func(uint256,address)") == [
        "uint256",
        "address",
    ]
    assert extract_argument_types_from_function_prototype("func(uint256,address,bytes[])") == [
        "uint256",
        "address",
        "bytes[]",
    ]
    assert extract_argument_types_from_function_prototype(
        "add_liquidity(address,uint256[4],uint256)"
    ) == ["address", "uint256[4]", "uint256"]


def test_extract_tuple_argument_types():
    assert extract_argument_types_from_function_prototype("swap((address,uint256)[],bool)") == [
        "(address,uint256)[]",
        "bool",
    ]


def test_extract_function_name():
    assert extract_function_name("calc_token_amount(uint256[3],bool)") == "calc_token_amount"
    assert extract_function_name("totalSupply()") == "totalSupply"


def test_function_selector():
    assert function_selector("approve(address,uint256)") == HexBytes("0x095ea7b3")
    assert function_selector("totalSupply()") == keccak(text="totalSupply()")[:4]


def test_encode_function_calldata():
    assert (
        encode_function_calldata(function_prototype="factory()", function_arguments=[])
        == HexBytes("0xc45a01550ceb4bc5c6b2e6f722b5033a03078f9bd6673457375ba94c26ac1cf0")[:4]
    )
    assert encode_function_calldata(function_prototype="factory()", function_arguments=None) == (
        encode_function_calldata(function_prototype="factory()", function_arguments=[])
    )
    assert encode_function_calldata(
        function_prototype="transfer(address,uint256)",
        function_arguments=[
            "0xA69babEF1cA67A37Ffaf7a485DfFF3382056e78C",
            26535330612692929974,
        ],
    ) == HexBytes(
        "0xa9059cbb000000000000000000000000a69babef1ca67a37ffaf7a485dfff3382056e78c00000000000000000000000000000000000000000000000170406e9a1f1c4db6"
    )


def test_decode_function_result():
    single = HexBytes(
        "0x00000000000000000000000000000000000000000000000170406e9a1f1c4db6"
    )
    assert decode_function_result(["uint256"], single) == 26535330612692929974

    pair = bytes(single) + (5).to_bytes(32, "big")
    assert decode_function_result(["uint256", "uint8"], pair) == (26535330612692929974, 5)
