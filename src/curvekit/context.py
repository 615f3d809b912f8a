import dataclasses

from eth_typing import ChecksumAddress

from curvekit.config import Settings
from curvekit.config import settings as default_settings
from curvekit.exceptions.base import CurvekitValueError
from curvekit.exceptions.wallet import MissingSigner
from curvekit.pools.registry import PoolDescriptorRegistry
from curvekit.prices import AbstractPriceOracle
from curvekit.transport.base import AbstractContractTransport
from curvekit.types.aliases import ChainId


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class PoolContext:
    """
    Everything an operation needs about the network and the session. Passed explicitly to the
    assembler and held by each pool; it is never mutated.
    """

    chain_id: ChainId
    transport: AbstractContractTransport
    registry: PoolDescriptorRegistry
    signer: ChecksumAddress | None = None
    price_oracle: AbstractPriceOracle | None = None
    settings: Settings = dataclasses.field(default_factory=lambda: default_settings)

    def require_signer(self) -> ChecksumAddress:
        if self.signer is None:
            raise MissingSigner
        return self.signer

    def require_price_oracle(self) -> AbstractPriceOracle:
        if self.price_oracle is None:
            raise CurvekitValueError(message="A price oracle is required to value coins in USD.")
        return self.price_oracle
