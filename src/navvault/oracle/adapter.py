"""
Price Oracle Adapter — два режима чтения цены volatile актива

Оборачивает внешний оракул и переводит его (mantissa, exponent) в цену
vault-точности (6 знаков, USD за 1 единицу volatile актива).

Режимы чтения:
- FRESH (get_price): оплата fee и применение update data (если переданы),
  затем чтение с проверкой возраста. Старая цена → StalePrice,
  отсутствие цены → OracleReadError. Никакого fallback.
  Используется во всех путях, которые двигают деньги по volatile цене.
- CACHED (get_price_view / read_cached): последняя известная цена без
  проверки возраста. При OracleReadError возвращается fallback 1.0:
  оценка vault не падает при недоступности оракула (availability важнее
  точности). Используется в оценке vault и read-only запросах.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Отрицательная мантисса → цена 0 (знак не пропагирует в денежную математику)
2. |adjusted exponent| ограничен MAX_SCALE_EXPONENT
3. Масштабированная цена насыщается на UINT256_MAX, а не переполняется
4. Refresh (оплата fee) всегда выполняется ДО чтения цены
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from navvault.core.clock import Clock, system_clock
from navvault.core.domain.price import PriceReading
from navvault.core.domain.units import stable_to_volatile, volatile_to_stable
from navvault.core.errors import InvalidInput, OracleReadError, StalePrice
from navvault.core.math.decimal_scaler import ONE_USD_PRICE, PRICE_DECIMALS
from navvault.core.math.numerical_safeguards import (
    pow10_capped,
    saturating_mul,
    validate_in_range,
    validate_non_negative_amount,
)
from navvault.oracle.interfaces import PriceOracleProtocol

logger = logging.getLogger(__name__)

DEFAULT_MAX_PRICE_AGE_SEC = 60


# =============================================================================
# PRICE SCALING
# =============================================================================


def scale_oracle_price(mantissa: int, exponent: int, target_precision: int = PRICE_DECIMALS) -> int:
    """
    Перевод цены оракула в целевую точность.

    adjusted = target_precision + exponent:
    - adjusted > 0: mantissa * 10**min(adjusted, 59), насыщение на UINT256_MAX
    - adjusted < 0: mantissa // 10**min(|adjusted|, 59)
    - adjusted == 0: mantissa без изменений

    Args:
        mantissa: Знаковая мантисса цены
        exponent: Знаковая экспонента (actual = mantissa * 10**exponent)
        target_precision: Количество знаков результата (default: 6)

    Returns:
        Неотрицательная цена в target_precision

    Examples:
        >>> scale_oracle_price(345_678_901, -8)  # $3.45678901
        3456789
        >>> scale_oracle_price(3, 0)
        3000000
        >>> scale_oracle_price(-5, -8)
        0
    """
    if mantissa < 0:
        return 0

    adjusted = target_precision + exponent

    if adjusted > 0:
        return saturating_mul(mantissa, pow10_capped(adjusted))
    if adjusted < 0:
        return mantissa // pow10_capped(adjusted)
    return mantissa


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class CachedPrice:
    """Результат cached-чтения."""

    price: int  # vault-точность (6 знаков)
    is_fallback: bool  # True если оракул недоступен и использован fallback
    publish_time: int | None  # None при fallback
    confidence: int = 0  # ± к price в vault-точности, 0 при fallback


# =============================================================================
# ADAPTER
# =============================================================================


class PriceOracleAdapter:
    """
    Адаптер оракула с fresh и cached режимами чтения.

    Не владеет средствами: fee за обновление цены передаётся вызывающим
    (update_fee) и целиком уходит оракулу.
    """

    def __init__(
        self,
        oracle: PriceOracleProtocol,
        clock: Clock = system_clock,
        max_price_age_sec: int = DEFAULT_MAX_PRICE_AGE_SEC,
        target_precision: int = PRICE_DECIMALS,
        fallback_price: int = ONE_USD_PRICE,
    ):
        """
        Args:
            oracle: внешний оракул
            clock: источник unix-времени
            max_price_age_sec: максимальный возраст цены на fresh-пути (default 60)
            target_precision: точность цены vault (default 6)
            fallback_price: цена cached-пути при сбое оракула (default 1.0)
        """
        validate_in_range(max_price_age_sec, "max_price_age_sec", min_value=0)
        validate_non_negative_amount(fallback_price, "fallback_price")

        self._oracle = oracle
        self._clock = clock
        self._max_price_age_sec = max_price_age_sec
        self._target_precision = target_precision
        self._fallback_price = fallback_price

    @property
    def max_price_age_sec(self) -> int:
        return self._max_price_age_sec

    @max_price_age_sec.setter
    def max_price_age_sec(self, value: int) -> None:
        validate_in_range(value, "max_price_age_sec", min_value=0)
        self._max_price_age_sec = value

    @property
    def fallback_price(self) -> int:
        return self._fallback_price

    # -------------------------------------------------------------------------
    # FRESH
    # -------------------------------------------------------------------------

    def quote_update_fee(self, update_data: Sequence[bytes]) -> int:
        """Fee, который оракул возьмёт за применение update_data."""
        if not update_data:
            return 0
        return self._oracle.get_update_fee(update_data)

    def refresh(self, update_data: Sequence[bytes], update_fee: int = 0) -> int:
        """
        Оплата fee и применение update data.

        Должно вызываться ДО любой оценки и мутации состояния: сбой здесь
        прерывает операцию целиком.

        Returns:
            Фактически уплаченный fee

        Raises:
            InvalidInput: Если переданного update_fee недостаточно
        """
        if not update_data:
            return 0

        validate_non_negative_amount(update_fee, "update_fee")
        required_fee = self._oracle.get_update_fee(update_data)
        if update_fee < required_fee:
            raise InvalidInput(
                f"Oracle update fee {required_fee} exceeds provided {update_fee}"
            )

        self._oracle.apply_update(update_data, required_fee)
        logger.debug("Oracle refreshed with %d update(s), fee=%d", len(update_data), required_fee)
        return required_fee

    def get_reading(self, update_data: Sequence[bytes] = (), update_fee: int = 0) -> PriceReading:
        """
        Fresh-чтение сырой цены.

        Raises:
            StalePrice: Если цена старше max_price_age_sec
            OracleReadError: Если цены нет
        """
        self.refresh(update_data, update_fee)

        reading = self._oracle.read_price(self._max_price_age_sec)
        now = self._clock()
        if reading.is_stale(now, self._max_price_age_sec):
            raise StalePrice(reading.publish_time, now, self._max_price_age_sec)
        return reading

    def get_price(self, update_data: Sequence[bytes] = (), update_fee: int = 0) -> int:
        """
        Fresh-чтение цены в vault-точности.

        Raises:
            StalePrice: Если цена старше max_price_age_sec
            OracleReadError: Если цены нет
        """
        reading = self.get_reading(update_data, update_fee)
        return scale_oracle_price(reading.price, reading.exponent, self._target_precision)

    # -------------------------------------------------------------------------
    # CACHED
    # -------------------------------------------------------------------------

    def read_cached(self) -> CachedPrice:
        """Cached-чтение: последняя цена любого возраста или fallback."""
        try:
            reading = self._oracle.read_price_unsafe()
        except OracleReadError as e:
            logger.warning(
                "Oracle read failed (%s), using fallback price %d", e, self._fallback_price
            )
            return CachedPrice(price=self._fallback_price, is_fallback=True, publish_time=None)

        return CachedPrice(
            price=scale_oracle_price(reading.price, reading.exponent, self._target_precision),
            is_fallback=False,
            publish_time=reading.publish_time,
            confidence=scale_oracle_price(reading.conf, reading.exponent, self._target_precision),
        )

    def get_price_view(self) -> int:
        """Cached-чтение цены в vault-точности (никогда не падает)."""
        return self.read_cached().price

    # -------------------------------------------------------------------------
    # CONVERSIONS
    # -------------------------------------------------------------------------

    def convert_volatile_to_stable_view(self, amount: int) -> int:
        """Стоимость volatile amount по cached цене (read-only)."""
        return volatile_to_stable(amount, self.get_price_view())

    def convert_stable_to_volatile_view(self, value: int) -> int:
        """Volatile amount для stable-стоимости по cached цене (read-only)."""
        return stable_to_volatile(value, self.get_price_view())
