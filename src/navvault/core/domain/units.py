"""
VaultUnits — Централизованный модуль конверсии единиц vault

Единственный допустимый способ преобразований между:
- volatile amount (18 знаков) ↔ USD-стоимость (stable, 6 знаков)
- USD-стоимость ↔ shares (18 знаков)
- profit → (performance fee, accretion)

ЗАПРЕЩЕНО смешивать единицы без явного конвертера из этого модуля.
"""

from enum import Enum
from typing import Final

from navvault.core.errors import InvalidInput, ZeroValuation
from navvault.core.math.decimal_scaler import (
    ONE_SHARE,
    PRICE_DECIMALS,
    SHARE_DECIMALS,
    STABLE_DECIMALS,
    VOLATILE_DECIMALS,
    scale_amount,
    stable_to_shares_precision,
)
from navvault.core.math.numerical_safeguards import bps_of, mul_div


# =============================================================================
# ENUMS
# =============================================================================


class AssetKind(str, Enum):
    """Вид актива vault."""

    STABLE = "stable"
    VOLATILE = "volatile"

    @property
    def decimals(self) -> int:
        if self is AssetKind.STABLE:
            return STABLE_DECIMALS
        return VOLATILE_DECIMALS

    @classmethod
    def parse(cls, value: "AssetKind | str") -> "AssetKind":
        """
        AssetKind из enum или его строкового значения.

        Raises:
            InvalidInput: Если value не является видом актива vault
        """
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidInput(f"Unknown asset kind: {value!r}") from e


# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Performance fee: 20% от прибыли агента
PERFORMANCE_FEE_BPS: Final[int] = 2_000


# =============================================================================
# КОНВЕРТЕРЫ ЦЕНЫ
# =============================================================================


def volatile_to_stable(amount: int, price: int) -> int:
    """
    Конверсия: volatile amount → USD-стоимость в stable точности.

    amount (18 знаков) * price (6 знаков) / 10**6 даёт USD в 18 знаках,
    затем Decimal Scaler переводит 18 → 6 (floor).

    Args:
        amount: Сумма volatile актива (18 знаков)
        price: Цена 1 единицы volatile актива в USD (6 знаков)

    Returns:
        Стоимость в stable точности (6 знаков)

    Examples:
        >>> volatile_to_stable(10**18, 3_000_000)  # 1 unit по $3
        3000000
    """
    usd_in_volatile_precision = mul_div(amount, price, 10**PRICE_DECIMALS)
    return scale_amount(usd_in_volatile_precision, VOLATILE_DECIMALS, STABLE_DECIMALS)


def stable_to_volatile(value: int, price: int) -> int:
    """
    Конверсия: USD-стоимость (stable точность) → volatile amount.

    Raises:
        ZeroValuation: Если price <= 0 (цена недоступна)

    Examples:
        >>> stable_to_volatile(3_000_000, 3_000_000)
        1000000000000000000
    """
    if price <= 0:
        raise ZeroValuation(f"Cannot convert {value} to volatile units at price {price}")

    value_in_volatile_precision = scale_amount(value, STABLE_DECIMALS, VOLATILE_DECIMALS)
    return mul_div(value_in_volatile_precision, 10**PRICE_DECIMALS, price)


# =============================================================================
# КОНВЕРТЕРЫ SHARES
# =============================================================================


def shares_for_value(value: int, total_shares: int, total_value: int) -> int:
    """
    Количество shares для депозита стоимостью value.

    - total_shares == 0: bootstrap 1:1 (value, приведённое к точности shares)
    - иначе: value * total_shares / total_value (total_value ДО депозита)

    Raises:
        ZeroValuation: Если shares есть, а total_value == 0
    """
    if total_shares == 0:
        return stable_to_shares_precision(value)

    if total_value <= 0:
        raise ZeroValuation(
            f"Vault value is {total_value} while {total_shares} shares are outstanding"
        )

    return mul_div(value, total_shares, total_value)


def value_for_shares(shares: int, total_shares: int, total_value: int) -> int:
    """
    Стоимость shares (stable точность): shares * total_value / total_shares.

    Raises:
        ValueError: Если total_shares == 0
    """
    if total_shares <= 0:
        raise ValueError(f"total_shares must be positive, got {total_shares}")

    return mul_div(shares, total_value, total_shares)


def price_per_share(total_value: int, total_shares: int) -> int:
    """
    NAV на share в точности shares.

    1.0 (ONE_SHARE) при пустом vault, иначе
    scale(total_value, 6 → 18) * 10**18 / total_shares.

    Examples:
        >>> price_per_share(1_080_000, 10**18)
        1080000000000000000
        >>> price_per_share(0, 0) == ONE_SHARE
        True
    """
    if total_shares == 0:
        return ONE_SHARE

    return mul_div(stable_to_shares_precision(total_value), 10**SHARE_DECIMALS, total_shares)


# =============================================================================
# PERFORMANCE FEE
# =============================================================================


def split_performance_fee(profit: int, fee_bps: int = PERFORMANCE_FEE_BPS) -> tuple[int, int]:
    """
    Разделение прибыли на performance fee и accretion акционерам.

    fee = floor(profit * fee_bps / 10000), accretion = profit - fee

    Examples:
        >>> split_performance_fee(100_000)
        (20000, 80000)
    """
    fee = bps_of(profit, fee_bps)
    return fee, profit - fee
