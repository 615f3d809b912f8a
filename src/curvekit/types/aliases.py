from decimal import Decimal

from hexbytes import HexBytes

ChainId = int
CoinIndex = int
TxHash = HexBytes

# Human-readable amount accepted from callers
type AmountLike = int | str | Decimal | float

# Gas estimate: a single value, or (L2 execution, L1 data) on rollups
type GasAmount = int | tuple[int, int]
