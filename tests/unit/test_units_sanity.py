"""
Sanity-тест для модуля VaultUnits

Проверяет:
1. Конверсии volatile ↔ stable по цене
2. Выпуск shares (bootstrap и пропорциональный)
3. NAV на share
4. Разделение прибыли на performance fee и accretion
5. Округление всегда в пользу vault
"""

import pytest

from navvault.core.domain.units import (
    PERFORMANCE_FEE_BPS,
    AssetKind,
    price_per_share,
    shares_for_value,
    split_performance_fee,
    stable_to_volatile,
    value_for_shares,
    volatile_to_stable,
)
from navvault.core.errors import InvalidInput, ZeroValuation
from navvault.core.math.decimal_scaler import ONE_SHARE

USD = 10**6
ETH = 10**18


class TestAssetKind:
    def test_decimals(self) -> None:
        assert AssetKind.STABLE.decimals == 6
        assert AssetKind.VOLATILE.decimals == 18

    def test_string_values(self) -> None:
        assert AssetKind("stable") is AssetKind.STABLE
        assert AssetKind.VOLATILE.value == "volatile"

    def test_parse(self) -> None:
        assert AssetKind.parse("volatile") is AssetKind.VOLATILE
        assert AssetKind.parse(AssetKind.STABLE) is AssetKind.STABLE

    @pytest.mark.parametrize("value", ["bitcoin", "", "STABLE", None])
    def test_parse_unknown(self, value) -> None:
        with pytest.raises(InvalidInput):
            AssetKind.parse(value)


class TestPriceConversions:
    """Тесты volatile_to_stable / stable_to_volatile"""

    def test_one_unit_at_three_dollars(self) -> None:
        assert volatile_to_stable(ETH, 3 * USD) == 3 * USD
        assert stable_to_volatile(3 * USD, 3 * USD) == ETH

    def test_fractional_amount(self) -> None:
        """0.5 единицы по $2500.50"""
        assert volatile_to_stable(ETH // 2, 2_500_500_000) == 1_250_250_000

    def test_dust_rounds_to_zero(self) -> None:
        """Сумма меньше 1 микродоллара округляется в ноль"""
        assert volatile_to_stable(1, 3 * USD) == 0
        assert volatile_to_stable(333_333_333_333, 3 * USD) == 0
        assert volatile_to_stable(333_333_333_334, 3 * USD) == 1

    def test_zero_price_volatile_is_worthless(self) -> None:
        assert volatile_to_stable(10 * ETH, 0) == 0

    def test_stable_to_volatile_zero_price_raises(self) -> None:
        with pytest.raises(ZeroValuation):
            stable_to_volatile(USD, 0)

    def test_round_trip_never_gains(self) -> None:
        """volatile → stable → volatile не увеличивает сумму"""
        for amount in (1, 10**12, 123_456_789_123_456_789, 7 * ETH):
            for price in (1, 999_999, 3 * USD, 65_432_100_000):
                value = volatile_to_stable(amount, price)
                assert stable_to_volatile(value, price) <= amount


class TestShareIssuance:
    """Тесты shares_for_value / value_for_shares"""

    def test_bootstrap_is_one_to_one(self) -> None:
        """Первый депозит: shares = value в точности shares"""
        assert shares_for_value(1_000_000, 0, 0) == ONE_SHARE
        assert shares_for_value(1, 0, 0) == 10**12

    def test_proportional_issuance(self) -> None:
        """Депозит равный стоимости vault удваивает supply"""
        assert shares_for_value(1_080_000, ONE_SHARE, 1_080_000) == ONE_SHARE

    def test_issuance_after_nav_growth(self) -> None:
        shares = shares_for_value(1_000_000, ONE_SHARE, 1_080_000)
        assert shares == 10**24 // 1_080_000
        assert shares < ONE_SHARE

    def test_zero_vault_value_with_shares_raises(self) -> None:
        with pytest.raises(ZeroValuation, match="shares are outstanding"):
            shares_for_value(1_000_000, ONE_SHARE, 0)

    def test_value_for_shares(self) -> None:
        assert value_for_shares(ONE_SHARE, ONE_SHARE, 1_080_000) == 1_080_000
        assert value_for_shares(ONE_SHARE // 2, ONE_SHARE, 1_080_001) == 540_000

    def test_value_for_shares_requires_supply(self) -> None:
        with pytest.raises(ValueError, match="total_shares must be positive"):
            value_for_shares(1, 0, 1_000_000)

    def test_deposit_then_redeem_never_gains(self) -> None:
        """Немедленный вывод после депозита не превышает депозит"""
        total_shares, total_value = 3 * ONE_SHARE + 7, 3_240_017
        for deposit in (1, 999, 1_000_000, 12_345_678):
            shares = shares_for_value(deposit, total_shares, total_value)
            redeemed = value_for_shares(shares, total_shares + shares, total_value + deposit)
            assert redeemed <= deposit


class TestPricePerShare:
    def test_empty_vault(self) -> None:
        assert price_per_share(0, 0) == ONE_SHARE
        assert price_per_share(5_000_000, 0) == ONE_SHARE

    def test_after_profit(self) -> None:
        assert price_per_share(1_080_000, ONE_SHARE) == 1_080_000_000_000_000_000

    def test_one_to_one(self) -> None:
        assert price_per_share(3 * USD, 3 * ONE_SHARE) == ONE_SHARE


class TestPerformanceFee:
    """Тесты split_performance_fee"""

    def test_fee_rate(self) -> None:
        assert PERFORMANCE_FEE_BPS == 2_000

    def test_split(self) -> None:
        assert split_performance_fee(100_000) == (20_000, 80_000)

    def test_fee_rounds_down(self) -> None:
        """fee = floor(profit * 0.2), остаток — акционерам"""
        assert split_performance_fee(7) == (1, 6)
        assert split_performance_fee(4) == (0, 4)
        assert split_performance_fee(1) == (0, 1)

    @pytest.mark.parametrize("profit", [1, 9, 10, 12_345, 10**18 + 3])
    def test_fee_plus_accretion_equals_profit(self, profit: int) -> None:
        fee, accretion = split_performance_fee(profit)
        assert fee + accretion == profit
        assert fee == profit * 2_000 // 10_000
