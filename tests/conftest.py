import logging
from collections.abc import Sequence
from typing import Any

import dotenv
import pytest
from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from curvekit.checksum_cache import get_checksum_address
from curvekit.config import Settings
from curvekit.context import PoolContext
from curvekit.functions import function_selector
from curvekit.logging import logger
from curvekit.pools.descriptor import PoolDescriptor
from curvekit.pools.registry import PoolDescriptorRegistry
from curvekit.prices import AbstractPriceOracle
from curvekit.transport.base import (
    AbstractContractTransport,
    ContractCall,
    NativeBalanceCall,
    SnapshotRead,
    TransactionRequest,
)

env_file = dotenv.find_dotenv("tests.env")
env_values = dotenv.dotenv_values(env_file)

ETHEREUM_FULL_NODE_HTTP_URI = env_values.get("ETHEREUM_FULL_NODE_HTTP_URI")

DEFAULT_GAS = 100_000
DEFAULT_L1_DATA_GAS = 2_000


def address(n: int) -> ChecksumAddress:
    return get_checksum_address(f"0x{n:040x}")


SIGNER = address(0x5151)


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


class FakeTransport(AbstractContractTransport):
    """
    In-memory transport. Reads are answered from a table keyed by contract address, function
    prototype and arguments; every batch, estimate and submitted transaction is recorded.
    """

    def __init__(self, chain_id: int = 1) -> None:
        self.chain_id = chain_id
        self.responses: dict[tuple[Any, ...], Any] = {}
        self.gas: dict[bytes, int | Exception] = {}
        self.batches: list[list[SnapshotRead]] = []
        self.estimated: list[TransactionRequest] = []
        self.sent: list[TransactionRequest] = []
        self.confirmed: list[HexBytes] = []

    def set_call(
        self,
        contract: str,
        function_prototype: str,
        function_arguments: Sequence[Any] = (),
        result: Any = None,
    ) -> None:
        self.responses[
            (get_checksum_address(contract), function_prototype, _freeze(function_arguments))
        ] = result

    def set_native_balance(self, owner: str, balance: int) -> None:
        self.responses[("native", get_checksum_address(owner))] = balance

    def set_gas(self, function_prototype: str, result: int | Exception) -> None:
        self.gas[function_selector(function_prototype)] = result

    @staticmethod
    def _key(read: SnapshotRead) -> tuple[Any, ...]:
        match read:
            case ContractCall():
                return (
                    read.address,
                    read.function_prototype,
                    _freeze(read.function_arguments),
                )
            case NativeBalanceCall():
                return ("native", read.address)

    async def call_many(self, reads: Sequence[SnapshotRead]) -> list[Any]:
        self.batches.append(list(reads))
        results = []
        for read in reads:
            key = self._key(read)
            if key not in self.responses:
                msg = f"Unexpected read: {key}"
                raise AssertionError(msg)
            result = self.responses[key]
            if isinstance(result, Exception):
                raise result
            results.append(result)
        return results

    async def estimate_gas(self, transaction: TransactionRequest) -> int:
        self.estimated.append(transaction)
        result = self.gas.get(transaction.data[:4], DEFAULT_GAS)
        if isinstance(result, Exception):
            raise result
        return result

    async def estimate_l1_data_gas(self, transaction: TransactionRequest) -> int:
        return DEFAULT_L1_DATA_GAS

    async def send_transaction(self, transaction: TransactionRequest) -> HexBytes:
        self.sent.append(transaction)
        return HexBytes(len(self.sent).to_bytes(32, "big"))

    async def wait_for_receipt(self, transaction_hash: HexBytes) -> None:
        self.confirmed.append(transaction_hash)

    def sent_selectors(self) -> list[bytes]:
        return [transaction.data[:4] for transaction in self.sent]


class FakePriceOracle(AbstractPriceOracle):
    def __init__(self, prices: dict[str, Any]) -> None:
        self.prices = {get_checksum_address(coin): price for coin, price in prices.items()}
        self.requests: list[tuple[ChecksumAddress, ...]] = []

    async def get_usd_prices(self, coins: Sequence[ChecksumAddress]) -> list[Any]:
        self.requests.append(tuple(coins))
        return [self.prices[coin] for coin in coins]


def make_context(
    transport: FakeTransport,
    descriptors: Sequence[PoolDescriptor],
    *,
    signer: ChecksumAddress | None = SIGNER,
    price_oracle: AbstractPriceOracle | None = None,
    **settings: Any,
) -> PoolContext:
    return PoolContext(
        chain_id=transport.chain_id,
        transport=transport,
        registry=PoolDescriptorRegistry(descriptors),
        signer=signer,
        price_oracle=price_oracle,
        settings=Settings(**settings),
    )


@pytest.fixture(scope="session", autouse=True)
def _set_curvekit_logging():
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


DAI = address(0xDA1)
USDC = address(0xC0C)
USDT = address(0xD7)
POOL_ADDRESS = address(0x1000)
LP_TOKEN = address(0x1001)
GAUGE = address(0x1002)
ZAP = address(0x1003)


def three_pool_descriptor(**overrides: Any) -> PoolDescriptor:
    """
    A plain 3-coin stable pool holding DAI, USDC and USDT.
    """

    coins = (DAI, USDC, USDT)
    return PoolDescriptor(
        **{
            "id": "3pool",
            "name": "3pool",
            "address": POOL_ADDRESS,
            "lp_token": LP_TOKEN,
            "gauge": GAUGE,
            "interface_kind": "stable-plain",
            "underlying_coins": coins,
            "wrapped_coins": coins,
            "underlying_decimals": (18, 6, 6),
            "wrapped_decimals": (18, 6, 6),
            "underlying_symbols": ("DAI", "USDC", "USDT"),
            "wrapped_symbols": ("DAI", "USDC", "USDT"),
            "is_plain": True,
        }
        | overrides
    )
