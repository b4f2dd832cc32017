"""
Share-Issuance/Redemption Engine — учётное ядро vault

DEPOSIT(kind, amount):
    1. amount > 0
    2. value = amount (stable) | volatile_to_stable(amount, FRESH price)
    3. value == 0 → ZeroValuation
    4. shares = value → 18 знаков (total_shares == 0, bootstrap 1:1)
              | value * total_shares / total_value_ДО_депозита
    5. transfer_in, mint, баланс, позиция, счётчики — атомарно

WITHDRAW(shares, kind):
    1. 0 < shares <= shares аккаунта
    2. FRESH price (если kind volatile), затем update_nav()
    3. value = shares * total_value / total_shares (живая total_value, не кэш NAV)
    4. payout = value | stable_to_volatile(value, price); payout <= баланс актива
    5. burn, баланс, позиция, счётчики, transfer_out — атомарно

Порядок: оплата fee и refresh оракула → чтение оценки → мутации.
Все деления — floor. Внешние эффекты регистрируют компенсации в UnitOfWork.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from navvault.core.clock import Clock, system_clock
from navvault.core.domain import units
from navvault.core.domain.position import UserPosition
from navvault.core.domain.units import AssetKind
from navvault.core.errors import InsufficientLiquidity, InvalidInput, ZeroValuation
from navvault.core.math.decimal_scaler import ONE_SHARE
from navvault.core.math.numerical_safeguards import validate_account, validate_positive_amount
from navvault.engine.book import VaultBook
from navvault.engine.guard import UnitOfWork
from navvault.engine.valuation import ValuationEngine
from navvault.ledger.interfaces import AssetLedgerProtocol, ShareLedgerProtocol
from navvault.oracle.adapter import PriceOracleAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# RECEIPTS
# =============================================================================


@dataclass(frozen=True)
class DepositReceipt:
    account: str
    asset: AssetKind
    amount: int
    value: int  # stable точность
    shares: int
    price: int | None  # fresh цена для volatile депозита


@dataclass(frozen=True)
class WithdrawalReceipt:
    account: str
    asset: AssetKind
    shares: int
    value: int  # stable точность
    amount: int  # выплата в точности актива
    price: int | None


@dataclass(frozen=True)
class DepositPreview:
    value: int
    shares: int
    price: int
    price_is_fallback: bool


@dataclass(frozen=True)
class WithdrawalPreview:
    value: int
    amount: int
    price: int
    price_is_fallback: bool


# =============================================================================
# ENGINE
# =============================================================================


class ShareIssuanceEngine:
    """Выпуск и погашение shares с сохранением пропорционального владения."""

    def __init__(
        self,
        book: VaultBook,
        share_ledger: ShareLedgerProtocol,
        asset_ledgers: Mapping[AssetKind, AssetLedgerProtocol],
        oracle: PriceOracleAdapter,
        valuation: ValuationEngine,
        clock: Clock = system_clock,
    ):
        self._book = book
        self._shares = share_ledger
        self._assets = asset_ledgers
        self._oracle = oracle
        self._valuation = valuation
        self._clock = clock

    # -------------------------------------------------------------------------
    # DEPOSIT
    # -------------------------------------------------------------------------

    def deposit(
        self,
        uow: UnitOfWork,
        account: str,
        kind: AssetKind,
        amount: int,
        update_data: Sequence[bytes] = (),
        update_fee: int = 0,
    ) -> DepositReceipt:
        """
        Депозит amount актива kind от account.

        Raises:
            InvalidInput: amount <= 0, пустой account, недостаточный update_fee
            StalePrice: fresh цена volatile актива устарела
            ZeroValuation: стоимость депозита или число shares равны нулю
            TransferFailure: актив не был получен
        """
        validate_account(account)
        validate_positive_amount(amount, "deposit amount")
        kind = AssetKind.parse(kind)

        # 1. Refresh оракула и fresh цена до любой оценки
        price: int | None = None
        if kind is AssetKind.VOLATILE:
            price = self._oracle.get_price(update_data, update_fee)
            value = units.volatile_to_stable(amount, price)
        else:
            self._oracle.refresh(update_data, update_fee)
            value = amount

        if value == 0:
            raise ZeroValuation(
                f"Deposit of {amount} {kind.value} is worth zero (price={price})"
            )

        # 2. Оценка ДО депозита
        state = self._book.state
        bootstrap = state.total_shares == 0
        total_value_before = 0 if bootstrap else self._valuation.money_total_value()
        shares = units.shares_for_value(value, state.total_shares, total_value_before)
        if shares == 0:
            raise ZeroValuation(f"Deposit value {value} mints zero shares")

        # 3. Внешние эффекты (с компенсациями)
        ledger = self._assets[kind]
        ledger.transfer_in(account, amount)
        uow.on_rollback(ledger.transfer_out, account, amount)

        self._shares.mint(account, shares)
        uow.on_rollback(self._shares.burn, account, shares)

        # 4. Учёт
        now = self._clock()
        new_state = state.with_balance_delta(kind, amount).with_shares_delta(shares)
        if bootstrap:
            new_state = new_state.with_nav(ONE_SHARE, now)
        self._book.state = new_state

        position = self._book.positions.get(account) or UserPosition.opened(account, now)
        self._book.positions[account] = position.with_deposit(kind, amount, shares, now)
        self._book.totals = self._book.totals.add(total_deposited_value=value)

        logger.info(
            "Deposit: account=%s asset=%s amount=%d value=%d shares=%d%s",
            account,
            kind.value,
            amount,
            value,
            shares,
            " (bootstrap)" if bootstrap else "",
        )
        return DepositReceipt(
            account=account, asset=kind, amount=amount, value=value, shares=shares, price=price
        )

    def preview_deposit(self, kind: AssetKind, amount: int) -> DepositPreview:
        """Оценка shares для депозита по cached цене (без побочных эффектов)."""
        validate_positive_amount(amount, "deposit amount")
        kind = AssetKind.parse(kind)
        cached = self._oracle.read_cached()

        value = amount if kind is AssetKind.STABLE else units.volatile_to_stable(amount, cached.price)
        state = self._book.state
        if value == 0:
            shares = 0
        elif state.total_shares == 0:
            shares = units.shares_for_value(value, 0, 0)
        else:
            total_value = self._valuation.total_value()
            shares = (
                units.shares_for_value(value, state.total_shares, total_value)
                if total_value > 0
                else 0
            )

        return DepositPreview(
            value=value, shares=shares, price=cached.price, price_is_fallback=cached.is_fallback
        )

    # -------------------------------------------------------------------------
    # WITHDRAW
    # -------------------------------------------------------------------------

    def withdraw(
        self,
        uow: UnitOfWork,
        account: str,
        shares: int,
        kind: AssetKind,
        update_data: Sequence[bytes] = (),
        update_fee: int = 0,
    ) -> WithdrawalReceipt:
        """
        Погашение shares аккаунта в актив kind.

        Raises:
            InvalidInput: shares <= 0 или больше баланса аккаунта
            StalePrice: fresh цена volatile актива устарела
            ZeroValuation: погашаемые shares ничего не стоят
            InsufficientLiquidity: баланса актива недостаточно для выплаты
            TransferFailure: выплата не была выполнена
        """
        validate_account(account)
        validate_positive_amount(shares, "withdraw shares")
        kind = AssetKind.parse(kind)

        held = self._shares.balance_of(account)
        if shares > held:
            raise InvalidInput(f"Cannot withdraw {shares} shares, account holds {held}")

        # 1. Refresh оракула и fresh цена до любой оценки
        price: int | None = None
        if kind is AssetKind.VOLATILE:
            price = self._oracle.get_price(update_data, update_fee)
        else:
            self._oracle.refresh(update_data, update_fee)

        # 2. Обновление кэша NAV, затем живая оценка
        self._valuation.update_nav()
        state = self._book.state
        total_value = self._valuation.money_total_value()
        value = units.value_for_shares(shares, state.total_shares, total_value)
        if value == 0:
            raise ZeroValuation(f"{shares} shares are worth zero at total value {total_value}")

        # 3. Выплата в нужном активе и проверка ликвидности
        if kind is AssetKind.VOLATILE:
            payout = units.stable_to_volatile(value, price)
            if payout == 0:
                raise ZeroValuation(f"Withdrawal value {value} converts to zero volatile units")
        else:
            payout = value

        available = state.balance_of(kind)
        if payout > available:
            raise InsufficientLiquidity(kind.value, payout, available)

        # 4. Burn и учёт
        self._shares.burn(account, shares)
        uow.on_rollback(self._shares.mint, account, shares)

        self._book.state = state.with_balance_delta(kind, -payout).with_shares_delta(-shares)
        self._book.positions[account] = self._book.positions[account].with_withdrawal(shares)
        self._book.totals = self._book.totals.add(total_withdrawn_value=value)

        # 5. Выплата: последний внешний эффект
        self._assets[kind].transfer_out(account, payout)

        logger.info(
            "Withdraw: account=%s asset=%s shares=%d value=%d payout=%d",
            account,
            kind.value,
            shares,
            value,
            payout,
        )
        return WithdrawalReceipt(
            account=account, asset=kind, shares=shares, value=value, amount=payout, price=price
        )

    def preview_withdraw(self, shares: int, kind: AssetKind) -> WithdrawalPreview:
        """Оценка выплаты за shares по cached цене (без побочных эффектов)."""
        validate_positive_amount(shares, "withdraw shares")
        kind = AssetKind.parse(kind)
        state = self._book.state
        valuation = self._valuation.valuation()

        if state.total_shares == 0:
            value = 0
        else:
            value = units.value_for_shares(
                min(shares, state.total_shares), state.total_shares, valuation.total_value
            )

        if kind is AssetKind.VOLATILE:
            amount = units.stable_to_volatile(value, valuation.price) if valuation.price > 0 else 0
        else:
            amount = value

        return WithdrawalPreview(
            value=value,
            amount=amount,
            price=valuation.price,
            price_is_fallback=valuation.price_is_fallback,
        )
