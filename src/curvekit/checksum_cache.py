import functools
from collections.abc import Iterable

from cchecksum import to_checksum_address
from eth_typing import ChecksumAddress, HexAddress


@functools.lru_cache(maxsize=1024)
def get_checksum_address(address: HexAddress | str | bytes) -> ChecksumAddress:
    return to_checksum_address(address)


def get_checksum_addresses(
    addresses: Iterable[HexAddress | str | bytes],
) -> tuple[ChecksumAddress, ...]:
    return tuple(get_checksum_address(address) for address in addresses)
