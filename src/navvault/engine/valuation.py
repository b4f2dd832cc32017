"""
Valuation Engine — стоимость vault и NAV на share

total_value = stable_balance + volatile_balance по cached цене оракула
              + активы у агентов (deployed_stable, deployed_volatile по той же цене)
price_per_share = 1.0 при пустом vault, иначе total_value(18 знаков) * 1e18 / total_shares
update_nav() записывает price_per_share в VaultState.nav_per_share

nav_per_share — кэш. Денежные операции считают от живой total_value,
а не от кэша.

Strict-режим: если cached цена ушла в fallback, а в vault лежит volatile
актив, оценка по 1:1 была бы неверной, и денежные операции получают
OracleUnavailable вместо неё. Read-only запросы используют non-strict.
"""

import logging
from dataclasses import dataclass

from navvault.core.clock import Clock, system_clock
from navvault.core.domain import units
from navvault.core.errors import OracleUnavailable
from navvault.core.math.decimal_scaler import FixedPoint
from navvault.engine.book import VaultBook
from navvault.oracle.adapter import PriceOracleAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Valuation:
    """Разложение стоимости vault."""

    stable_value: int  # stable точность
    volatile_value: int  # stable точность
    deployed_value: int  # stable точность, активы у агентов
    total_value: int  # stable точность
    price: int  # цена volatile актива (6 знаков)
    price_is_fallback: bool


class ValuationEngine:
    def __init__(
        self,
        book: VaultBook,
        oracle: PriceOracleAdapter,
        clock: Clock = system_clock,
        strict: bool = True,
    ):
        self._book = book
        self._oracle = oracle
        self._clock = clock
        self.strict = strict

    def valuation(self) -> Valuation:
        """Оценка vault по cached цене (никогда не падает)."""
        state = self._book.state
        cached = self._oracle.read_cached()

        stable = FixedPoint.stable(state.stable_balance)
        volatile_as_stable = FixedPoint.stable(
            units.volatile_to_stable(state.volatile_balance, cached.price)
        )
        # Средства у агентов остаются собственностью акционеров
        deployed = FixedPoint.stable(state.deployed_stable) + FixedPoint.stable(
            units.volatile_to_stable(state.deployed_volatile, cached.price)
        )
        total = stable + volatile_as_stable + deployed

        logger.debug(
            "Valuation: stable=%d volatile=%d deployed=%d price=%d fallback=%s",
            stable.value,
            volatile_as_stable.value,
            deployed.value,
            cached.price,
            cached.is_fallback,
        )
        return Valuation(
            stable_value=stable.value,
            volatile_value=volatile_as_stable.value,
            deployed_value=deployed.value,
            total_value=total.value,
            price=cached.price,
            price_is_fallback=cached.is_fallback,
        )

    def total_value(self, strict: bool = False) -> int:
        """
        Стоимость vault в stable точности.

        Args:
            strict: Запретить оценку volatile актива по fallback-цене

        Raises:
            OracleUnavailable: strict=True, цена в fallback и в vault или у агентов
                есть volatile актив
        """
        valuation = self.valuation()
        state = self._book.state
        holds_volatile = state.volatile_balance > 0 or state.deployed_volatile > 0
        if strict and valuation.price_is_fallback and holds_volatile:
            raise OracleUnavailable(
                "Cannot value volatile holdings while the oracle is unavailable"
            )
        return valuation.total_value

    def money_total_value(self) -> int:
        """total_value для денежных операций (strict согласно настройке vault)."""
        return self.total_value(strict=self.strict)

    def price_per_share(self, strict: bool = False) -> int:
        """Живой NAV на share (18 знаков)."""
        state = self._book.state
        if state.total_shares == 0:
            return units.price_per_share(0, 0)
        return units.price_per_share(self.total_value(strict=strict), state.total_shares)

    def update_nav(self) -> int:
        """
        Пересчёт и запись nav_per_share в VaultState.

        Returns:
            Новый nav_per_share
        """
        nav = self.price_per_share(strict=self.strict)
        now = self._clock()
        self._book.state = self._book.state.with_nav(nav, now)
        logger.debug("NAV updated to %d at %d", nav, now)
        return nav
