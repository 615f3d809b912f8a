from .base import (
    AbstractContractTransport,
    ContractCall,
    NativeBalanceCall,
    SnapshotRead,
    TransactionRequest,
)
from .web3_transport import Web3Transport

__all__ = (
    "AbstractContractTransport",
    "ContractCall",
    "NativeBalanceCall",
    "SnapshotRead",
    "TransactionRequest",
    "Web3Transport",
)
