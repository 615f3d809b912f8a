import abc
from collections.abc import Mapping, Sequence
from decimal import Decimal

from eth_typing import ChecksumAddress

from curvekit.checksum_cache import get_checksum_address, get_checksum_addresses
from curvekit.exceptions.base import CurvekitValueError
from curvekit.math.fixed_point import format_units
from curvekit.transport.base import AbstractContractTransport, ContractCall


class AbstractPriceOracle(abc.ABC):
    """
    Source of spot USD prices. Used only for bonus, balanced-amount and liquidity figures of crypto
    pools.
    """

    @abc.abstractmethod
    async def get_usd_prices(self, coins: Sequence[ChecksumAddress]) -> list[Decimal]: ...


class StaticPriceOracle(AbstractPriceOracle):
    def __init__(self, prices: Mapping[str, Decimal | str | int]) -> None:
        self._prices = {
            get_checksum_address(coin): Decimal(price) for coin, price in prices.items()
        }

    async def get_usd_prices(self, coins: Sequence[ChecksumAddress]) -> list[Decimal]:
        try:
            return [self._prices[coin] for coin in coins]
        except KeyError as exc:
            raise CurvekitValueError(message=f"No USD price for {exc.args[0]}") from None


class ChainlinkPriceOracle(AbstractPriceOracle):
    """
    Reads prices from Chainlink aggregators. The price is decimal-corrected and represents the
    nominal token price in USD (e.g. 1 DAI = 1.0 USD).
    """

    def __init__(
        self,
        transport: AbstractContractTransport,
        feeds: Mapping[str, str],
    ) -> None:
        self.transport = transport
        self._feeds = dict(
            zip(get_checksum_addresses(feeds), get_checksum_addresses(feeds.values()), strict=True)
        )

    async def get_usd_prices(self, coins: Sequence[ChecksumAddress]) -> list[Decimal]:
        try:
            feeds = [self._feeds[coin] for coin in coins]
        except KeyError as exc:
            raise CurvekitValueError(message=f"No price feed for {exc.args[0]}") from None

        results = await self.transport.call_many(
            [
                *(ContractCall(feed, "decimals()", return_types=("uint8",)) for feed in feeds),
                *(
                    ContractCall(
                        feed,
                        "latestRoundData()",
                        return_types=("uint80", "int256", "uint256", "uint256", "uint80"),
                    )
                    for feed in feeds
                ),
            ]
        )
        decimals, rounds = results[: len(feeds)], results[len(feeds) :]
        return [
            Decimal(format_units(max(answer, 0), feed_decimals))
            for feed_decimals, (_, answer, *_) in zip(decimals, rounds, strict=True)
        ]
