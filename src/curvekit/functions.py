from collections.abc import Sequence
from typing import Any

import eth_abi.abi
from eth_utils.crypto import keccak


def function_selector(function_prototype: str) -> bytes:
    return keccak(text=function_prototype)[:4]


def encode_function_calldata(
    function_prototype: str, function_arguments: Sequence[Any] | None
) -> bytes:
    """
    Encode the calldata to execute a call to the given function prototype, with ordered arguments.
    The resulting bytes array will include the 4-byte function selector, followed by the
    ABI-encoded arguments.
    """

    if function_arguments is None:
        function_arguments = ()

    return function_selector(function_prototype) + eth_abi.abi.encode(
        types=extract_argument_types_from_function_prototype(function_prototype),
        args=function_arguments,
    )


def extract_argument_types_from_function_prototype(function_prototype: str) -> list[str]:
    """
    Extract the argument types from the function prototype.

    e.g. the argument types for the prototype 'function(address,uint256)' are ['address','uint256'],
    and for 'swap((address,uint256)[],bool)' they are ['(address,uint256)[]','bool']
    """

    function_args = function_prototype[
        function_prototype.find("(") + 1 : function_prototype.rfind(")")
    ]
    if not function_args:
        return []

    argument_types: list[str] = []
    depth = 0
    start = 0
    for position, character in enumerate(function_args):
        if character == "(":
            depth += 1
        elif character == ")":
            depth -= 1
        elif character == "," and depth == 0:
            argument_types.append(function_args[start:position])
            start = position + 1
    argument_types.append(function_args[start:])
    return argument_types


def extract_function_name(function_prototype: str) -> str:
    return function_prototype[: function_prototype.find("(")]


def decode_function_result(return_types: Sequence[str], data: bytes) -> Any:
    """
    Decode the return data of a call. A single return value is unwrapped from its tuple.
    """

    result = eth_abi.abi.decode(types=list(return_types), data=data)
    return result[0] if len(result) == 1 else result
