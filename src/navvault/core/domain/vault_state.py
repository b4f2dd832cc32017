"""
VaultState — Модели состояния vault

Immutable Pydantic модели:
- VaultState: балансы, supply shares, кэш NAV
- NavSnapshot: запись NAV history
- VaultStats: read-only снапшот статистики для отчётов

Совместимы с JSON Schema (navvault/core/contracts/schema/*.json).
"""

from pydantic import BaseModel, Field

from navvault.core.math.decimal_scaler import ONE_SHARE

from .units import AssetKind


# =============================================================================
# VAULT STATE
# =============================================================================


class VaultState(BaseModel):
    """
    Состояние vault.

    nav_per_share — кэш: точен только сразу после update_nav(),
    источником истины для денежных операций не является.
    """

    stable_balance: int = Field(0, ge=0, description="Баланс stable asset (6 знаков)")
    volatile_balance: int = Field(0, ge=0, description="Баланс volatile asset (18 знаков)")
    total_shares: int = Field(0, ge=0, description="Supply shares (18 знаков)")
    nav_per_share: int = Field(ONE_SHARE, ge=0, description="Кэш NAV на share (18 знаков)")
    last_nav_update_time: int = Field(0, ge=0, description="Время обновления NAV (unix s)")

    # Активы, находящиеся у агентов (входят в total_value)
    deployed_stable: int = Field(0, ge=0, description="Stable asset у агентов")
    deployed_volatile: int = Field(0, ge=0, description="Volatile asset у агентов")

    model_config = {"frozen": True}

    def balance_of(self, kind: AssetKind) -> int:
        if kind is AssetKind.STABLE:
            return self.stable_balance
        return self.volatile_balance

    def with_balance_delta(self, kind: AssetKind, delta: int) -> "VaultState":
        """Новое состояние с изменённым балансом актива kind."""
        field = "stable_balance" if kind is AssetKind.STABLE else "volatile_balance"
        return self.model_validate(
            self.model_dump() | {field: getattr(self, field) + delta}
        )

    def with_deployed_delta(self, kind: AssetKind, delta: int) -> "VaultState":
        """Новое состояние с изменённым объёмом актива у агентов."""
        field = "deployed_stable" if kind is AssetKind.STABLE else "deployed_volatile"
        return self.model_validate(
            self.model_dump() | {field: getattr(self, field) + delta}
        )

    def deployed_of(self, kind: AssetKind) -> int:
        if kind is AssetKind.STABLE:
            return self.deployed_stable
        return self.deployed_volatile

    def with_shares_delta(self, delta: int) -> "VaultState":
        return self.model_validate(
            self.model_dump() | {"total_shares": self.total_shares + delta}
        )

    def with_nav(self, nav_per_share: int, now: int) -> "VaultState":
        return self.model_validate(
            self.model_dump()
            | {"nav_per_share": nav_per_share, "last_nav_update_time": now}
        )


# =============================================================================
# NAV SNAPSHOT
# =============================================================================


class NavSnapshot(BaseModel):
    """Запись NAV history. Неизменна после добавления."""

    timestamp: int = Field(..., ge=0, description="Время снапшота (unix s)")
    nav_per_share: int = Field(..., ge=0, description="NAV на share (18 знаков)")
    total_value: int = Field(..., ge=0, description="Стоимость vault (6 знаков)")

    model_config = {"frozen": True}


# =============================================================================
# VAULT STATS
# =============================================================================


class VaultStats(BaseModel):
    """
    Снапшот статистики vault.

    active_users вычисляется из карты позиций, а не поддерживается
    отдельным счётчиком.
    """

    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)

    total_value: int = Field(..., ge=0, description="Стоимость vault (6 знаков)")
    nav_per_share: int = Field(..., ge=0, description="Кэш NAV (18 знаков)")
    total_shares: int = Field(..., ge=0)
    stable_balance: int = Field(..., ge=0)
    volatile_balance: int = Field(..., ge=0)
    deployed_stable: int = Field(..., ge=0)
    deployed_volatile: int = Field(..., ge=0)

    total_users: int = Field(..., ge=0, description="Аккаунты, когда-либо вносившие депозит")
    active_users: int = Field(..., ge=0, description="Аккаунты с shares > 0")

    total_deposited_value: int = Field(..., ge=0, description="Сумма депозитов (USD, 6 знаков)")
    total_withdrawn_value: int = Field(..., ge=0, description="Сумма выводов (USD, 6 знаков)")
    total_profit_value: int = Field(..., ge=0, description="Сумма прибыли агентов (USD)")
    total_fees_value: int = Field(..., ge=0, description="Сумма performance fee (USD)")

    last_nav_update_time: int = Field(..., ge=0)
    price_is_fallback: bool = Field(..., description="Оценка использует fallback-цену")

    model_config = {"frozen": True}
