from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Self

from eth_typing import ChecksumAddress

from curvekit.checksum_cache import get_checksum_address
from curvekit.exceptions.registry import PoolAlreadyRegistered, UnknownPool
from curvekit.pools.descriptor import PoolDescriptor, load_pool_descriptors


class PoolDescriptorRegistry:
    """
    Descriptors by pool id for one chain. Descriptors are immutable; the registry only grows or
    shrinks.
    """

    def __init__(self, descriptors: Iterable[PoolDescriptor] = ()) -> None:
        self._descriptors: dict[str, PoolDescriptor] = {}
        for descriptor in descriptors:
            self.add(descriptor)

    @classmethod
    def from_file(cls, path: Path) -> Self:
        return cls(load_pool_descriptors(path))

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._descriptors

    def __iter__(self) -> Iterator[PoolDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def add(self, descriptor: PoolDescriptor) -> None:
        if descriptor.id in self._descriptors:
            raise PoolAlreadyRegistered(descriptor.id)
        self._descriptors[descriptor.id] = descriptor

    def get(self, pool_id: str) -> PoolDescriptor:
        try:
            return self._descriptors[pool_id]
        except KeyError:
            raise UnknownPool(pool_id) from None

    def remove(self, pool_id: str) -> None:
        try:
            del self._descriptors[pool_id]
        except KeyError:
            raise UnknownPool(pool_id) from None

    def find_by_address(self, address: str) -> PoolDescriptor | None:
        checksummed: ChecksumAddress = get_checksum_address(address)
        for descriptor in self._descriptors.values():
            if checksummed in {descriptor.address, descriptor.lp_token}:
                return descriptor
        return None

    def base_pool_of(self, descriptor: PoolDescriptor) -> PoolDescriptor | None:
        if descriptor.base_pool is None:
            return None
        return self.get(descriptor.base_pool)
