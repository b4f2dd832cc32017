"""
Тесты для Decimal Scaler

Проверяет:
1. Повышение/понижение точности (точное умножение / floor)
2. Конверсии stable ↔ shares
3. FixedPoint: запрет смешивания точностей
"""

import pytest

from navvault.core.math.decimal_scaler import (
    ONE_SHARE,
    ONE_USD_PRICE,
    ONE_VOLATILE,
    SHARE_DECIMALS,
    STABLE_DECIMALS,
    VOLATILE_DECIMALS,
    FixedPoint,
    scale_amount,
    shares_to_stable_precision,
    stable_to_shares_precision,
)


class TestPrecisions:
    def test_precision_constants(self) -> None:
        assert STABLE_DECIMALS == 6
        assert VOLATILE_DECIMALS == 18
        assert SHARE_DECIMALS == 18
        assert ONE_SHARE == 10**18
        assert ONE_VOLATILE == 10**18
        assert ONE_USD_PRICE == 10**6


class TestScaleAmount:
    """Тесты для scale_amount"""

    def test_scale_up_is_exact(self) -> None:
        """Повышение точности — точное умножение"""
        assert scale_amount(1_000_000, 6, 18) == 10**18
        assert scale_amount(1, 6, 18) == 10**12

    def test_scale_down_floors(self) -> None:
        """Понижение точности — отбрасывание младших разрядов"""
        assert scale_amount(10**18, 18, 6) == 1_000_000
        assert scale_amount(1_999_999_999_999, 18, 6) == 1
        assert scale_amount(999_999_999_999, 18, 6) == 0

    def test_same_precision_unchanged(self) -> None:
        assert scale_amount(42, 6, 6) == 42

    def test_negative_precision_raises(self) -> None:
        with pytest.raises(ValueError, match="precisions must be non-negative"):
            scale_amount(1, -1, 6)

    def test_stable_shares_helpers(self) -> None:
        assert stable_to_shares_precision(1_080_000) == 1_080_000 * 10**12
        assert shares_to_stable_precision(1_080_000 * 10**12 + 999) == 1_080_000

    def test_down_then_up_never_gains(self) -> None:
        """Понижение и обратное повышение не создают стоимость"""
        for amount in (0, 1, 10**12 - 1, 10**12, 123_456_789_012_345_678):
            assert scale_amount(scale_amount(amount, 18, 6), 6, 18) <= amount


class TestFixedPoint:
    """Тесты для FixedPoint"""

    def test_constructors_tag_precision(self) -> None:
        assert FixedPoint.stable(1).precision == 6
        assert FixedPoint.volatile(1).precision == 18
        assert FixedPoint.shares(1).precision == 18

    def test_same_precision_arithmetic(self) -> None:
        a = FixedPoint.stable(1_500_000)
        b = FixedPoint.stable(500_000)

        assert (a + b).value == 2_000_000
        assert (a - b).value == 1_000_000
        assert a > b
        assert b <= a

    def test_mixed_precision_rejected(self) -> None:
        """Сложение и сравнение разных точностей запрещены"""
        stable = FixedPoint.stable(1_000_000)
        shares = FixedPoint.shares(10**18)

        with pytest.raises(ValueError, match="Precision mismatch"):
            stable + shares

        with pytest.raises(ValueError, match="Precision mismatch"):
            stable < shares

    def test_rescale_makes_values_comparable(self) -> None:
        stable = FixedPoint.stable(1_000_000)
        shares = FixedPoint.shares(10**18)

        assert stable.rescale(SHARE_DECIMALS) == shares
        assert shares.rescale(STABLE_DECIMALS) == stable

    def test_mul_div_keeps_precision(self) -> None:
        value = FixedPoint.stable(100_000).mul_div(2_000, 10_000)
        assert value == FixedPoint.stable(20_000)

    def test_non_int_value_rejected(self) -> None:
        with pytest.raises(TypeError, match="must be int"):
            FixedPoint(1.5, 6)

        with pytest.raises(TypeError, match="must be int"):
            FixedPoint(True, 6)

    def test_is_zero(self) -> None:
        assert FixedPoint.stable(0).is_zero()
        assert not FixedPoint.stable(1).is_zero()
