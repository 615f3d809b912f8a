from curvekit.exceptions.allowance import AllowanceError, InsufficientAllowanceForEstimate
from curvekit.exceptions.base import CurvekitError, CurvekitTypeError, CurvekitValueError
from curvekit.exceptions.connection import (
    ConnectionTimeout,
    CurvekitConnectionError,
    NoConnectionForChain,
    TransactionReverted,
    Web3ConnectionTimeout,
)
from curvekit.exceptions.math import InvalidAmount, InvalidSlippage
from curvekit.exceptions.network import NetworkRestricted
from curvekit.exceptions.pool import (
    AmountsLengthMismatch,
    CoinIndexOutOfRange,
    InvalidPoolDescriptor,
    PoolError,
    SameCoinSwap,
    UnknownCoin,
    UnknownPoolInterface,
    UnsupportedOperationForPoolShape,
)
from curvekit.exceptions.registry import PoolAlreadyRegistered, RegistryError, UnknownPool
from curvekit.exceptions.transport import CallReverted, GasEstimationFailed, TransportError
from curvekit.exceptions.wallet import InsufficientBalance, MissingSigner, WalletError
from curvekit.exceptions.worker import DelegatedComputationTimeout

from . import allowance, connection, math, network, pool, registry, transport, wallet, worker

__all__ = (
    "AllowanceError",
    "AmountsLengthMismatch",
    "CallReverted",
    "CoinIndexOutOfRange",
    "ConnectionTimeout",
    "CurvekitConnectionError",
    "CurvekitError",
    "CurvekitTypeError",
    "CurvekitValueError",
    "DelegatedComputationTimeout",
    "GasEstimationFailed",
    "InsufficientAllowanceForEstimate",
    "InsufficientBalance",
    "InvalidAmount",
    "InvalidPoolDescriptor",
    "InvalidSlippage",
    "MissingSigner",
    "NetworkRestricted",
    "NoConnectionForChain",
    "PoolAlreadyRegistered",
    "PoolError",
    "RegistryError",
    "SameCoinSwap",
    "TransactionReverted",
    "TransportError",
    "UnknownCoin",
    "UnknownPool",
    "UnknownPoolInterface",
    "UnsupportedOperationForPoolShape",
    "WalletError",
    "Web3ConnectionTimeout",
    "allowance",
    "connection",
    "math",
    "network",
    "pool",
    "registry",
    "transport",
    "wallet",
    "worker",
)
