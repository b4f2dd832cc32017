"""
Decimal Scaler — конверсия между fixed-point точностями

В vault одновременно живут три точности:
- stable asset: 6 знаков (USD-эквивалент, единица учёта стоимости)
- volatile asset: 18 знаков
- shares: 18 знаков

ЗАПРЕЩЕНО масштабировать суммы inline (`* 10**12`, `// 10**12`):
вся межточностная арифметика проходит через scale_amount / FixedPoint.

Правила:
- Повышение точности — точное целочисленное умножение
- Понижение точности — floor-деление (усечение к нулю)
"""

from dataclasses import dataclass
from typing import Final

from navvault.core.math.numerical_safeguards import mul_div

# =============================================================================
# ТОЧНОСТИ
# =============================================================================

STABLE_DECIMALS: Final[int] = 6
VOLATILE_DECIMALS: Final[int] = 18
SHARE_DECIMALS: Final[int] = 18

# Точность цены volatile актива (USD за 1 единицу, как у stable asset)
PRICE_DECIMALS: Final[int] = 6

ONE_SHARE: Final[int] = 10**SHARE_DECIMALS
ONE_VOLATILE: Final[int] = 10**VOLATILE_DECIMALS
ONE_USD_PRICE: Final[int] = 10**PRICE_DECIMALS


# =============================================================================
# SCALE
# =============================================================================


def scale_amount(amount: int, from_precision: int, to_precision: int) -> int:
    """
    Перевод суммы из одной точности в другую.

    amount * 10**(to - from) при повышении точности,
    amount // 10**(from - to) при понижении.

    Args:
        amount: Сумма в исходной точности
        from_precision: Исходное количество знаков
        to_precision: Целевое количество знаков

    Returns:
        Сумма в целевой точности

    Examples:
        >>> scale_amount(1_000_000, 6, 18)
        1000000000000000000
        >>> scale_amount(1_999_999_999_999, 18, 6)
        1
        >>> scale_amount(42, 6, 6)
        42
    """
    if from_precision < 0 or to_precision < 0:
        raise ValueError(
            f"precisions must be non-negative, got {from_precision} -> {to_precision}"
        )

    if to_precision > from_precision:
        return amount * 10 ** (to_precision - from_precision)
    if to_precision < from_precision:
        return amount // 10 ** (from_precision - to_precision)
    return amount


def stable_to_shares_precision(amount: int) -> int:
    """Stable-сумма (6 знаков) → точность shares (18 знаков)."""
    return scale_amount(amount, STABLE_DECIMALS, SHARE_DECIMALS)


def shares_to_stable_precision(amount: int) -> int:
    """Сумма в точности shares → stable (6 знаков), floor."""
    return scale_amount(amount, SHARE_DECIMALS, STABLE_DECIMALS)


# =============================================================================
# FIXED POINT VALUE
# =============================================================================


@dataclass(frozen=True)
class FixedPoint:
    """
    Fixed-point значение с явным тегом точности.

    Сложение, вычитание и сравнение разрешены только при одинаковой
    точности; приведение — только через rescale().
    """

    value: int
    precision: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"FixedPoint value must be int, got {self.value!r}")
        if self.precision < 0:
            raise ValueError(f"precision must be non-negative, got {self.precision}")

    @classmethod
    def stable(cls, value: int) -> "FixedPoint":
        return cls(value, STABLE_DECIMALS)

    @classmethod
    def volatile(cls, value: int) -> "FixedPoint":
        return cls(value, VOLATILE_DECIMALS)

    @classmethod
    def shares(cls, value: int) -> "FixedPoint":
        return cls(value, SHARE_DECIMALS)

    def rescale(self, precision: int) -> "FixedPoint":
        """Приведение к другой точности (floor при понижении)."""
        return FixedPoint(scale_amount(self.value, self.precision, precision), precision)

    def mul_div(self, numerator: int, denominator: int) -> "FixedPoint":
        """floor(value * numerator / denominator) в той же точности."""
        return FixedPoint(mul_div(self.value, numerator, denominator), self.precision)

    def is_zero(self) -> bool:
        return self.value == 0

    def _check_same_precision(self, other: "FixedPoint") -> None:
        if not isinstance(other, FixedPoint):
            raise TypeError(f"Expected FixedPoint, got {type(other).__name__}")
        if other.precision != self.precision:
            raise ValueError(
                f"Precision mismatch: {self.precision} vs {other.precision}, "
                f"rescale() explicitly first"
            )

    def __add__(self, other: "FixedPoint") -> "FixedPoint":
        self._check_same_precision(other)
        return FixedPoint(self.value + other.value, self.precision)

    def __sub__(self, other: "FixedPoint") -> "FixedPoint":
        self._check_same_precision(other)
        return FixedPoint(self.value - other.value, self.precision)

    def __lt__(self, other: "FixedPoint") -> bool:
        self._check_same_precision(other)
        return self.value < other.value

    def __le__(self, other: "FixedPoint") -> bool:
        self._check_same_precision(other)
        return self.value <= other.value

    def __gt__(self, other: "FixedPoint") -> bool:
        self._check_same_precision(other)
        return self.value > other.value

    def __ge__(self, other: "FixedPoint") -> bool:
        self._check_same_precision(other)
        return self.value >= other.value
