"""
Vault — публичный фасад vault с пропорциональным владением

Связывает оракул, оценку, выпуск/погашение shares, распределение прибыли
и NAV history. Каждая мутирующая операция:
- выполняется под NonReentrantGuard (вложенный/конкурентный вызов → ReentrantCall)
- выполняется в UnitOfWork (любое исключение → полный откат)
- привилегированные операции проверяют роль до любых эффектов

Read-only запросы не мутируют состояние и используют cached цену.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Mapping, Sequence

from navvault.config import VaultConfig
from navvault.core.contracts import USER_POSITION, VAULT_STATS, contract
from navvault.core.clock import Clock, system_clock
from navvault.core.domain.position import UserPosition
from navvault.core.domain.units import AssetKind
from navvault.core.domain.vault_state import NavSnapshot, VaultState, VaultStats
from navvault.core.errors import Unauthorized
from navvault.core.math.numerical_safeguards import validate_account, validate_in_range
from navvault.engine.book import VaultBook
from navvault.engine.guard import NonReentrantGuard, UnitOfWork
from navvault.engine.issuance import (
    DepositPreview,
    DepositReceipt,
    ShareIssuanceEngine,
    WithdrawalPreview,
    WithdrawalReceipt,
)
from navvault.engine.nav_history import NavHistoryLedger
from navvault.engine.profit import ProfitDistributionEngine, ProfitReceipt
from navvault.engine.valuation import ValuationEngine
from navvault.ledger.interfaces import (
    ADMIN_ROLE,
    AGENT_ROLE,
    AccessControlProtocol,
    AssetLedgerProtocol,
    ShareLedgerProtocol,
)
from navvault.oracle.adapter import PriceOracleAdapter
from navvault.oracle.interfaces import PriceOracleProtocol

logger = logging.getLogger(__name__)


class Vault:
    """Dual-asset vault: stable + volatile актив, shares пропорционально USD-стоимости."""

    def __init__(
        self,
        oracle: PriceOracleProtocol,
        share_ledger: ShareLedgerProtocol,
        asset_ledgers: Mapping[AssetKind, AssetLedgerProtocol],
        access_control: AccessControlProtocol,
        config: VaultConfig | None = None,
        clock: Clock = system_clock,
    ):
        """
        Args:
            oracle: ценовой оракул volatile актива
            share_ledger: ledger shares (vault — единственный, кто в него пишет)
            asset_ledgers: ledger для каждого AssetKind
            access_control: проверка ролей ADMIN_ROLE / AGENT_ROLE
            config: параметры vault
            clock: источник unix-времени
        """
        missing = set(AssetKind) - set(asset_ledgers)
        if missing:
            raise ValueError(f"asset_ledgers missing {sorted(k.value for k in missing)}")

        self.config = config or VaultConfig()
        validate_account(self.config.fee_recipient, "fee_recipient")

        self._access = access_control
        self._share_ledger = share_ledger
        self._fee_recipient = self.config.fee_recipient

        self._book = VaultBook()
        self._history = NavHistoryLedger(self.config.history_capacity)
        self._guard = NonReentrantGuard()

        self._oracle = PriceOracleAdapter(
            oracle,
            clock=clock,
            max_price_age_sec=self.config.max_price_age_sec,
            fallback_price=self.config.fallback_price,
        )
        self._valuation = ValuationEngine(
            self._book, self._oracle, clock=clock, strict=self.config.strict_valuation
        )
        self._issuance = ShareIssuanceEngine(
            self._book, share_ledger, asset_ledgers, self._oracle, self._valuation, clock=clock
        )
        self._profit = ProfitDistributionEngine(
            self._book,
            asset_ledgers,
            self._oracle,
            self._valuation,
            self._history,
            fee_recipient=lambda: self._fee_recipient,
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @contextmanager
    def _mutating(self, operation: str) -> Iterator[UnitOfWork]:
        with self._guard.enter(operation):
            with UnitOfWork(operation, self._book, self._history) as uow:
                yield uow

    def _require_role(self, role: str, account: str) -> None:
        if not self._access.has_role(role, account):
            raise Unauthorized(account, role)

    # =========================================================================
    # USER OPERATIONS
    # =========================================================================

    def deposit(
        self,
        account: str,
        kind: AssetKind,
        amount: int,
        update_data: Sequence[bytes] = (),
        update_fee: int = 0,
    ) -> DepositReceipt:
        with self._mutating("deposit") as uow:
            return self._issuance.deposit(uow, account, kind, amount, update_data, update_fee)

    def deposit_stable(self, account: str, amount: int) -> DepositReceipt:
        return self.deposit(account, AssetKind.STABLE, amount)

    def deposit_volatile(
        self,
        account: str,
        amount: int,
        update_data: Sequence[bytes] = (),
        update_fee: int = 0,
    ) -> DepositReceipt:
        return self.deposit(account, AssetKind.VOLATILE, amount, update_data, update_fee)

    def withdraw(
        self,
        account: str,
        shares: int,
        kind: AssetKind = AssetKind.STABLE,
        update_data: Sequence[bytes] = (),
        update_fee: int = 0,
    ) -> WithdrawalReceipt:
        with self._mutating("withdraw") as uow:
            return self._issuance.withdraw(uow, account, shares, kind, update_data, update_fee)

    def refresh_nav(self, update_data: Sequence[bytes] = (), update_fee: int = 0) -> int:
        """Refresh оракула (опционально) и пересчёт кэша NAV."""
        with self._mutating("refresh_nav"):
            self._oracle.refresh(update_data, update_fee)
            return self._valuation.update_nav()

    # =========================================================================
    # AGENT OPERATIONS
    # =========================================================================

    def request_funds(self, agent: str, kind: AssetKind, amount: int) -> int:
        self._require_role(AGENT_ROLE, agent)
        with self._mutating("request_funds") as uow:
            return self._profit.request_funds(uow, agent, kind, amount)

    def return_funds(self, agent: str, kind: AssetKind, amount: int) -> int:
        self._require_role(AGENT_ROLE, agent)
        with self._mutating("return_funds") as uow:
            return self._profit.return_funds(uow, agent, kind, amount)

    def return_funds_with_profit(
        self,
        agent: str,
        profit: int,
        kind: AssetKind,
        update_data: Sequence[bytes] = (),
        update_fee: int = 0,
    ) -> ProfitReceipt:
        self._require_role(AGENT_ROLE, agent)
        with self._mutating("return_funds_with_profit") as uow:
            return self._profit.return_funds_with_profit(
                uow, agent, profit, kind, update_data, update_fee
            )

    # =========================================================================
    # ADMIN OPERATIONS
    # =========================================================================

    def set_fee_recipient(self, admin: str, recipient: str) -> None:
        self._require_role(ADMIN_ROLE, admin)
        validate_account(recipient, "fee_recipient")
        with self._mutating("set_fee_recipient"):
            previous, self._fee_recipient = self._fee_recipient, recipient
        logger.info("Fee recipient changed by %s: %s -> %s", admin, previous, recipient)

    def set_max_price_age(self, admin: str, seconds: int) -> None:
        self._require_role(ADMIN_ROLE, admin)
        validate_in_range(seconds, "max_price_age_sec", min_value=0)
        with self._mutating("set_max_price_age"):
            previous = self._oracle.max_price_age_sec
            self._oracle.max_price_age_sec = seconds
        logger.info("Max price age changed by %s: %ds -> %ds", admin, previous, seconds)

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def state(self) -> VaultState:
        return self._book.state

    @property
    def nav_per_share(self) -> int:
        """Кэш NAV на момент последнего update_nav()."""
        return self._book.state.nav_per_share

    @property
    def fee_recipient(self) -> str:
        return self._fee_recipient

    @property
    def max_price_age_sec(self) -> int:
        return self._oracle.max_price_age_sec

    @property
    def oracle(self) -> PriceOracleAdapter:
        return self._oracle

    @property
    def is_locked(self) -> bool:
        return self._guard.locked

    @property
    def latest_profit_price(self) -> int | None:
        latest = self._profit.latest_price
        return latest.price if latest is not None else None

    @property
    def latest_profit_confidence(self) -> int | None:
        latest = self._profit.latest_price
        return latest.confidence if latest is not None else None

    def total_value(self) -> int:
        return self._valuation.total_value()

    def price_per_share(self) -> int:
        return self._valuation.price_per_share()

    def share_balance(self, account: str) -> int:
        return self._share_ledger.balance_of(account)

    def position(self, account: str) -> UserPosition | None:
        return self._book.positions.get(account)

    def positions(self) -> list[UserPosition]:
        return list(self._book.positions.values())

    def nav_history(self, offset: int = 0, limit: int | None = None) -> list[NavSnapshot]:
        return self._history.page(offset, limit)

    def export_nav_history(self) -> list[dict]:
        return self._history.export()

    def preview_deposit(self, kind: AssetKind, amount: int) -> DepositPreview:
        return self._issuance.preview_deposit(kind, amount)

    def preview_withdraw(self, shares: int, kind: AssetKind = AssetKind.STABLE) -> WithdrawalPreview:
        return self._issuance.preview_withdraw(shares, kind)

    def convert_volatile_to_stable_view(self, amount: int) -> int:
        return self._oracle.convert_volatile_to_stable_view(amount)

    def stats(self) -> VaultStats:
        state = self._book.state
        totals = self._book.totals
        valuation = self._valuation.valuation()
        return VaultStats(
            name=self.config.name,
            symbol=self.config.symbol,
            total_value=valuation.total_value,
            nav_per_share=state.nav_per_share,
            total_shares=state.total_shares,
            stable_balance=state.stable_balance,
            volatile_balance=state.volatile_balance,
            deployed_stable=state.deployed_stable,
            deployed_volatile=state.deployed_volatile,
            total_users=self._book.total_users,
            active_users=self._book.active_users,
            total_deposited_value=totals.total_deposited_value,
            total_withdrawn_value=totals.total_withdrawn_value,
            total_profit_value=totals.total_profit_value,
            total_fees_value=totals.total_fees_value,
            last_nav_update_time=state.last_nav_update_time,
            price_is_fallback=valuation.price_is_fallback,
        )

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_stats(self) -> dict:
        """stats() в виде dict, проверенного по контракту vault_stats."""
        return contract(VAULT_STATS).export(self.stats())

    def export_position(self, account: str) -> dict | None:
        """Позиция аккаунта по контракту user_position (None, если депозитов не было)."""
        position = self._book.positions.get(account)
        if position is None:
            return None
        return contract(USER_POSITION).export(position)
