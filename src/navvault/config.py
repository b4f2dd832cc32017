"""
Конфигурация vault.

VaultConfig — immutable параметры одного vault (frozen dataclass).
VaultSettings — те же параметры из окружения (префикс NAVVAULT_) или .env.

Ставка performance fee фиксирована (units.PERFORMANCE_FEE_BPS) и через
конфигурацию не меняется.
"""

import logging
from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

from navvault.core.math.decimal_scaler import ONE_USD_PRICE
from navvault.engine.nav_history import DEFAULT_HISTORY_CAPACITY
from navvault.oracle.adapter import DEFAULT_MAX_PRICE_AGE_SEC


@dataclass(frozen=True)
class VaultConfig:
    """Параметры vault.

    - max_price_age_sec: порог staleness fresh-чтения цены
    - fallback_price: цена cached-чтения при сбое оракула (6 знаков)
    - strict_valuation: запрет денежных операций по fallback-цене,
      если в vault есть volatile актив
    """

    name: str = "Agent of Profits Vault"
    symbol: str = "AOP"
    fee_recipient: str = "fee-recipient"
    max_price_age_sec: int = DEFAULT_MAX_PRICE_AGE_SEC
    fallback_price: int = ONE_USD_PRICE
    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    strict_valuation: bool = True


class VaultSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NAVVAULT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    NAME: str = VaultConfig.name
    SYMBOL: str = VaultConfig.symbol
    FEE_RECIPIENT: str = VaultConfig.fee_recipient
    MAX_PRICE_AGE_SEC: int = VaultConfig.max_price_age_sec
    FALLBACK_PRICE: int = VaultConfig.fallback_price
    HISTORY_CAPACITY: int = VaultConfig.history_capacity
    STRICT_VALUATION: bool = VaultConfig.strict_valuation
    LOG_LEVEL: str = "INFO"

    def to_config(self) -> VaultConfig:
        return VaultConfig(
            name=self.NAME,
            symbol=self.SYMBOL,
            fee_recipient=self.FEE_RECIPIENT,
            max_price_age_sec=self.MAX_PRICE_AGE_SEC,
            fallback_price=self.FALLBACK_PRICE,
            history_capacity=self.HISTORY_CAPACITY,
            strict_valuation=self.STRICT_VALUATION,
        )


def configure_logging(level: str | int | None = None) -> None:
    """
    Базовая настройка logging для скриптов и локальных прогонов.

    Args:
        level: Уровень логгера navvault (None: NAVVAULT_LOG_LEVEL из окружения)
    """
    if level is None:
        level = VaultSettings().LOG_LEVEL
    if isinstance(level, str):
        level = level.upper()

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("navvault").setLevel(level)
