"""
Numerical Safeguards — Safe Integer Math Primitives

Модуль обеспечивает численную устойчивость всей fixed-point арифметики vault:
- Целочисленное умножение-деление с округлением вниз (floor)
- Степени десяти с ограничением диапазона экспоненты
- Насыщение (saturation) на границе uint256 вместо переполнения
- Basis points
- Валидация сумм и аккаунтов

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все суммы — int, float в денежной арифметике запрещён
2. Все деления округляют вниз (к нулю для неотрицательных значений)
3. Деление на ноль никогда не происходит молча (ValueError)
4. Результат никогда не превышает UINT256_MAX (saturation, не wrap)
5. Все операции детерминированы и воспроизводимы
"""

from typing import Final

from navvault.core.errors import InvalidInput

# =============================================================================
# ГРАНИЦЫ ДИАПАЗОНА
# =============================================================================

# Максимум беззнакового 256-битного целого; все суммы и цены ограничены им
UINT256_MAX: Final[int] = 2**256 - 1

# Ограничение |экспоненты| при масштабировании цен оракула
MAX_SCALE_EXPONENT: Final[int] = 59

# Знаменатель basis points
BPS_DENOMINATOR: Final[int] = 10_000


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Вычисление floor(a * b / denominator) без промежуточной потери точности.

    Python int не переполняется, поэтому произведение считается точно,
    а затем делится с округлением вниз.

    Args:
        a: Первый множитель (>= 0)
        b: Второй множитель (>= 0)
        denominator: Делитель (> 0)

    Returns:
        floor(a * b / denominator)

    Raises:
        ValueError: Если denominator <= 0 или множители отрицательные

    Examples:
        >>> mul_div(10, 3, 4)
        7
        >>> mul_div(1_000_000, 10**12, 1)
        1000000000000000000
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    if a < 0 or b < 0:
        raise ValueError(f"mul_div operands must be non-negative, got {a}, {b}")

    return (a * b) // denominator


# =============================================================================
# СТЕПЕНИ ДЕСЯТИ И НАСЫЩЕНИЕ
# =============================================================================


def pow10_capped(exponent: int, cap: int = MAX_SCALE_EXPONENT) -> int:
    """
    10**min(|exponent|, cap).

    Экспонента берётся по модулю: направление масштабирования (умножение
    или деление) выбирает вызывающий.

    Examples:
        >>> pow10_capped(3)
        1000
        >>> pow10_capped(-2)
        100
        >>> pow10_capped(100) == 10**59
        True
    """
    if cap < 0:
        raise ValueError(f"cap must be non-negative, got {cap}")
    return 10 ** min(abs(exponent), cap)


def saturate(value: int, max_value: int = UINT256_MAX) -> int:
    """
    Ограничение значения сверху (saturation вместо wrap-around).

    Examples:
        >>> saturate(5)
        5
        >>> saturate(2**300) == UINT256_MAX
        True
    """
    return min(value, max_value)


def saturating_mul(a: int, b: int, max_value: int = UINT256_MAX) -> int:
    """a * b с насыщением на max_value."""
    return saturate(a * b, max_value)


# =============================================================================
# BASIS POINTS
# =============================================================================


def bps_of(amount: int, bps: int) -> int:
    """
    Доля суммы в basis points с округлением вниз.

    Examples:
        >>> bps_of(100_000, 2000)
        20000
        >>> bps_of(7, 2000)
        1
    """
    validate_in_range(bps, "bps", 0, BPS_DENOMINATOR)
    return mul_div(amount, bps, BPS_DENOMINATOR)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_valid_amount(value: object) -> bool:
    """
    Проверка, является ли значение целочисленной суммой.

    bool формально int, но как сумма не допускается.
    """
    return isinstance(value, int) and not isinstance(value, bool)


def validate_positive_amount(value: int, name: str) -> None:
    """
    Валидация, что сумма — положительный int.

    Raises:
        InvalidInput: Если value не int или value <= 0
    """
    if not is_valid_amount(value):
        raise InvalidInput(f"{name} must be an integer amount, got {value!r}")

    if value <= 0:
        raise InvalidInput(f"{name} must be positive, got {value}")


def validate_non_negative_amount(value: int, name: str) -> None:
    """
    Валидация, что сумма — неотрицательный int.

    Raises:
        InvalidInput: Если value не int или value < 0
    """
    if not is_valid_amount(value):
        raise InvalidInput(f"{name} must be an integer amount, got {value!r}")

    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: int,
    name: str,
    min_value: int | None = None,
    max_value: int | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне.

    Raises:
        InvalidInput: Если value вне диапазона
    """
    if min_value is not None and value < min_value:
        raise InvalidInput(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise InvalidInput(f"{name} must be <= {max_value}, got {value}")


def validate_account(account: str, name: str = "account") -> None:
    """
    Валидация идентификатора аккаунта (аналог zero address check).

    Raises:
        InvalidInput: Если account пустой или не строка
    """
    if not isinstance(account, str) or not account.strip():
        raise InvalidInput(f"{name} must be a non-empty account id, got {account!r}")
