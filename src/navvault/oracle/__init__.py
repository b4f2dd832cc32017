"""Oracle — адаптер ценового оракула и его локальная реализация."""

from .adapter import (
    DEFAULT_MAX_PRICE_AGE_SEC,
    CachedPrice,
    PriceOracleAdapter,
    scale_oracle_price,
)
from .interfaces import PriceOracleProtocol
from .memory import InMemoryPriceOracle, decode_price_update, encode_price_update

__all__ = [
    "DEFAULT_MAX_PRICE_AGE_SEC",
    "CachedPrice",
    "PriceOracleAdapter",
    "PriceOracleProtocol",
    "InMemoryPriceOracle",
    "decode_price_update",
    "encode_price_update",
    "scale_oracle_price",
]
