from pathlib import Path
from typing import Annotated, Any, Self

import ujson
from eth_typing import ChecksumAddress
from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator

from curvekit.checksum_cache import get_checksum_address
from curvekit.constants import ZERO_ADDRESS
from curvekit.exceptions.pool import InvalidPoolDescriptor

Address = Annotated[ChecksumAddress, AfterValidator(get_checksum_address)]
AbiEntry = dict[str, Any]


class PoolDescriptor(BaseModel):
    """
    Declarative description of a pool. Coin lists are parallel arrays: `underlying_coins[i]` has
    `underlying_decimals[i]` decimals, and likewise for the wrapped coins.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: str
    address: Address
    lp_token: Address
    gauge: Address = ZERO_ADDRESS
    zap: Address | None = None

    # Capability table keys. `implementation` is the factory blueprint the pool was deployed from.
    implementation: Address | None = None
    interface_kind: str | None = None
    zap_interface_kind: str | None = None

    underlying_coins: tuple[Address, ...]
    wrapped_coins: tuple[Address, ...]
    underlying_decimals: tuple[int, ...]
    wrapped_decimals: tuple[int, ...]
    underlying_symbols: tuple[str, ...] = ()
    wrapped_symbols: tuple[str, ...] = ()

    base_pool: str | None = None
    meta_coin_index: int | None = None
    use_lending: tuple[bool, ...] = ()
    reward_tokens: tuple[Address, ...] = ()

    is_plain: bool = False
    is_lending: bool = False
    is_meta: bool = False
    is_crypto: bool = False
    is_fake: bool = False
    is_factory: bool = False
    is_ng: bool = False

    # ABI fallback for contracts missing from the capability table
    swap_abi: tuple[AbiEntry, ...] | None = None
    zap_abi: tuple[AbiEntry, ...] | None = None

    @model_validator(mode="after")
    def check_parallel_arrays(self) -> Self:
        if len(self.underlying_coins) != len(self.underlying_decimals):
            raise InvalidPoolDescriptor(
                message=f"{self.id}: underlying coins and decimals have different lengths"
            )
        if len(self.wrapped_coins) != len(self.wrapped_decimals):
            raise InvalidPoolDescriptor(
                message=f"{self.id}: wrapped coins and decimals have different lengths"
            )
        for symbols, coins in (
            (self.underlying_symbols, self.underlying_coins),
            (self.wrapped_symbols, self.wrapped_coins),
        ):
            if symbols and len(symbols) != len(coins):
                raise InvalidPoolDescriptor(
                    message=f"{self.id}: coin symbols and addresses have different lengths"
                )
        if self.use_lending and len(self.use_lending) != len(self.wrapped_coins):
            raise InvalidPoolDescriptor(
                message=f"{self.id}: use_lending must have one entry per wrapped coin"
            )
        if self.is_meta and self.base_pool is None:
            raise InvalidPoolDescriptor(message=f"{self.id}: meta pools require a base pool")
        if len(self.wrapped_coins) < 2:  # noqa: PLR2004
            raise InvalidPoolDescriptor(message=f"{self.id}: a pool holds at least two coins")
        return self

    @property
    def coin_count(self) -> int:
        return len(self.wrapped_coins)

    @property
    def underlying_coin_count(self) -> int:
        return len(self.underlying_coins)

    @property
    def lending_coins(self) -> tuple[bool, ...]:
        return self.use_lending or tuple(False for _ in self.wrapped_coins)

    @property
    def resolved_meta_coin_index(self) -> int:
        """
        Position of the base pool LP token among the wrapped coins. Defaults to the last coin.
        """

        return self.coin_count - 1 if self.meta_coin_index is None else self.meta_coin_index

    def with_overrides(self, **fields: Any) -> Self:
        return self.model_validate(self.model_dump() | fields)


def load_pool_descriptors(path: Path) -> list[PoolDescriptor]:
    """
    Load descriptors from a JSON file holding either a list of descriptors or a mapping of pool id
    to descriptor.
    """

    raw = ujson.loads(path.read_text())
    if isinstance(raw, dict):
        raw = [{"id": pool_id} | descriptor for pool_id, descriptor in raw.items()]
    return [PoolDescriptor.model_validate(descriptor) for descriptor in raw]
