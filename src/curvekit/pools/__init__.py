from .assembler import PoolAssembler
from .descriptor import PoolDescriptor, load_pool_descriptors
from .flags import PoolFlags, resolve_pool_flags
from .gauge import GaugeOperations
from .interface import (
    CAPABILITY_TABLE_VERSION,
    ContractInterface,
    PoolInterfaces,
    resolve_contract_interface,
)
from .pool import CurvePool, PoolGasEstimates, PoolReserves
from .registry import PoolDescriptorRegistry
from .strategy import StrategyRegistry, select_variants
from .variants import CallTarget, OperationFamily, OperationVariant, OperationVariants, VariantKind

__all__ = (
    "CAPABILITY_TABLE_VERSION",
    "CallTarget",
    "ContractInterface",
    "CurvePool",
    "GaugeOperations",
    "OperationFamily",
    "OperationVariant",
    "OperationVariants",
    "PoolAssembler",
    "PoolDescriptor",
    "PoolDescriptorRegistry",
    "PoolFlags",
    "PoolGasEstimates",
    "PoolInterfaces",
    "PoolReserves",
    "StrategyRegistry",
    "VariantKind",
    "load_pool_descriptors",
    "resolve_contract_interface",
    "resolve_pool_flags",
    "select_variants",
)
