"""
InMemoryPriceOracle — локальная реализация pull-оракула

Используется в тестах, симуляциях и локальных прогонах vault.
Поведение повторяет pull-оракул: обновление цены приносит вызывающий
в виде подписанных сообщений и платит fee за каждое сообщение;
цена заменяется только более свежей публикацией.

Формат сообщения обновления (big-endian, 28 байт):
    int64 price | uint64 conf | int32 exponent | uint64 publish_time
"""

import struct
from typing import Final, Sequence

from navvault.core.clock import Clock, system_clock
from navvault.core.domain.price import PriceReading
from navvault.core.errors import OracleReadError, StalePrice, TransferFailure

UPDATE_FORMAT: Final[str] = ">qQiQ"
UPDATE_SIZE: Final[int] = struct.calcsize(UPDATE_FORMAT)

DEFAULT_FEE_PER_UPDATE: Final[int] = 1


def encode_price_update(price: int, exponent: int, publish_time: int, conf: int = 0) -> bytes:
    """Сериализация сообщения обновления цены."""
    return struct.pack(UPDATE_FORMAT, price, conf, exponent, publish_time)


def decode_price_update(payload: bytes) -> PriceReading:
    """
    Десериализация сообщения обновления цены.

    Raises:
        ValueError: Если длина сообщения неверна
    """
    if len(payload) != UPDATE_SIZE:
        raise ValueError(f"Price update must be {UPDATE_SIZE} bytes, got {len(payload)}")
    price, conf, exponent, publish_time = struct.unpack(UPDATE_FORMAT, payload)
    return PriceReading(price=price, conf=conf, exponent=exponent, publish_time=publish_time)


class InMemoryPriceOracle:
    """Оракул одного ценового фида в памяти процесса."""

    def __init__(
        self,
        clock: Clock = system_clock,
        fee_per_update: int = DEFAULT_FEE_PER_UPDATE,
    ):
        self._clock = clock
        self._fee_per_update = fee_per_update
        self._latest: PriceReading | None = None
        self._outage = False

        # Суммарно собранные fee (для проверок в тестах)
        self.fees_collected = 0
        self.updates_applied = 0

    # -------------------------------------------------------------------------
    # Управление фидом
    # -------------------------------------------------------------------------

    def publish(
        self, price: int, exponent: int, publish_time: int | None = None, conf: int = 0
    ) -> PriceReading:
        """Прямая публикация цены (как если бы её обновил другой участник)."""
        reading = PriceReading(
            price=price,
            conf=conf,
            exponent=exponent,
            publish_time=self._clock() if publish_time is None else publish_time,
        )
        self._store(reading)
        return reading

    def set_outage(self, outage: bool) -> None:
        """Имитация недоступности оракула: все чтения поднимают OracleReadError."""
        self._outage = outage

    def _store(self, reading: PriceReading) -> None:
        if self._latest is None or reading.publish_time >= self._latest.publish_time:
            self._latest = reading

    # -------------------------------------------------------------------------
    # PriceOracleProtocol
    # -------------------------------------------------------------------------

    def get_update_fee(self, update_data: Sequence[bytes]) -> int:
        return self._fee_per_update * len(update_data)

    def apply_update(self, update_data: Sequence[bytes], fee: int) -> None:
        required = self.get_update_fee(update_data)
        if fee < required:
            raise TransferFailure(f"Oracle update fee {fee} below required {required}")

        readings = [decode_price_update(payload) for payload in update_data]
        for reading in readings:
            self._store(reading)

        self.fees_collected += fee
        self.updates_applied += len(readings)

    def read_price(self, max_age_sec: int) -> PriceReading:
        reading = self.read_price_unsafe()
        now = self._clock()
        if reading.is_stale(now, max_age_sec):
            raise StalePrice(reading.publish_time, now, max_age_sec)
        return reading

    def read_price_unsafe(self) -> PriceReading:
        if self._outage:
            raise OracleReadError("Oracle is unavailable")
        if self._latest is None:
            raise OracleReadError("Price feed has no published price")
        return self._latest
