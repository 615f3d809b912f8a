from .checksum_cache import get_checksum_address
from .config import settings
from .version import __version__

# isort: split

from . import exceptions
from .connection import AsyncConnectionManager
from .context import PoolContext
from .erc20 import AllowanceManager
from .gas import GasEstimate, GasEstimator
from .logging import logger
from .math import Amount, format_units, parse_units
from .pools import (
    CurvePool,
    OperationFamily,
    OperationVariant,
    PoolAssembler,
    PoolDescriptor,
    PoolDescriptorRegistry,
    PoolFlags,
)
from .prices import AbstractPriceOracle, ChainlinkPriceOracle, StaticPriceOracle
from .transport import AbstractContractTransport, Web3Transport

__all__ = (
    "AbstractContractTransport",
    "AbstractPriceOracle",
    "AllowanceManager",
    "Amount",
    "AsyncConnectionManager",
    "ChainlinkPriceOracle",
    "CurvePool",
    "GasEstimate",
    "GasEstimator",
    "OperationFamily",
    "OperationVariant",
    "PoolAssembler",
    "PoolContext",
    "PoolDescriptor",
    "PoolDescriptorRegistry",
    "PoolFlags",
    "StaticPriceOracle",
    "Web3Transport",
    "__version__",
    "exceptions",
    "format_units",
    "get_checksum_address",
    "logger",
    "parse_units",
    "settings",
)
