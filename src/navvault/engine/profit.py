"""
Profit-Distribution Engine — движение средств агентов и распределение прибыли

request_funds: агент забирает актив vault для внешнего использования
return_funds: агент возвращает основную сумму (не больше выданного, без fee)
return_funds_with_profit:
    1. refresh оракула (оплата fee) — до любой оценки и мутаций
    2. fee = floor(profit * 2000 / 10000), accretion = profit - fee
    3. agent → vault: profit; баланс += accretion
    4. update_nav(), запись NavSnapshot
    5. vault → fee recipient: fee (последний внешний эффект)

Это единственный путь, которым nav_per_share растёт выше 1.0.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Sequence

from navvault.core.domain import units
from navvault.core.domain.units import AssetKind
from navvault.core.domain.vault_state import NavSnapshot
from navvault.core.errors import InsufficientLiquidity, InvalidInput
from navvault.core.math.numerical_safeguards import validate_account, validate_positive_amount
from navvault.engine.book import VaultBook
from navvault.engine.guard import UnitOfWork
from navvault.engine.nav_history import NavHistoryLedger
from navvault.engine.valuation import ValuationEngine
from navvault.ledger.interfaces import AssetLedgerProtocol
from navvault.oracle.adapter import CachedPrice, PriceOracleAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfitReceipt:
    agent: str
    asset: AssetKind
    profit: int
    fee: int
    accretion: int
    fee_recipient: str
    nav_before: int
    nav_after: int
    snapshot: NavSnapshot


class ProfitDistributionEngine:
    def __init__(
        self,
        book: VaultBook,
        asset_ledgers: Mapping[AssetKind, AssetLedgerProtocol],
        oracle: PriceOracleAdapter,
        valuation: ValuationEngine,
        history: NavHistoryLedger,
        fee_recipient: Callable[[], str],
    ):
        self._book = book
        self._assets = asset_ledgers
        self._oracle = oracle
        self._valuation = valuation
        self._history = history
        self._fee_recipient = fee_recipient

        # Единственный кэш цены в vault: последняя цена, прочитанная при
        # распределении прибыли
        self._latest_price: CachedPrice | None = None

    @property
    def latest_price(self) -> CachedPrice | None:
        return self._latest_price

    # -------------------------------------------------------------------------
    # AGENT FUNDS
    # -------------------------------------------------------------------------

    def request_funds(self, uow: UnitOfWork, agent: str, kind: AssetKind, amount: int) -> int:
        """
        Выдача актива агенту.

        Raises:
            InvalidInput: amount <= 0
            InsufficientLiquidity: баланс актива меньше amount
        """
        validate_account(agent, "agent")
        validate_positive_amount(amount, "requested amount")
        kind = AssetKind.parse(kind)

        state = self._book.state
        available = state.balance_of(kind)
        if amount > available:
            raise InsufficientLiquidity(kind.value, amount, available)

        self._book.state = state.with_balance_delta(kind, -amount).with_deployed_delta(kind, amount)
        self._assets[kind].transfer_out(agent, amount)

        logger.info("Agent %s requested %d %s", agent, amount, kind.value)
        return amount

    def return_funds(self, uow: UnitOfWork, agent: str, kind: AssetKind, amount: int) -> int:
        """
        Возврат основной суммы агентом (без прибыли).

        Raises:
            InvalidInput: amount <= 0 или больше выданного агентам
            TransferFailure: агент не передал amount
        """
        validate_account(agent, "agent")
        validate_positive_amount(amount, "returned amount")
        kind = AssetKind.parse(kind)

        # Сверх выданного только return_funds_with_profit (с performance fee)
        deployed = self._book.state.deployed_of(kind)
        if amount > deployed:
            raise InvalidInput(
                f"Cannot return {amount} {kind.value}, only {deployed} is deployed"
            )

        ledger = self._assets[kind]
        ledger.transfer_in(agent, amount)
        uow.on_rollback(ledger.transfer_out, agent, amount)

        self._book.state = self._book.state.with_balance_delta(kind, amount).with_deployed_delta(
            kind, -amount
        )

        logger.info("Agent %s returned %d %s", agent, amount, kind.value)
        return amount

    # -------------------------------------------------------------------------
    # PROFIT
    # -------------------------------------------------------------------------

    def return_funds_with_profit(
        self,
        uow: UnitOfWork,
        agent: str,
        profit: int,
        kind: AssetKind,
        update_data: Sequence[bytes] = (),
        update_fee: int = 0,
    ) -> ProfitReceipt:
        """
        Возврат прибыли агентом: fee получателю, остаток — акционерам.

        Raises:
            InvalidInput: profit <= 0, недостаточный update_fee
            TransferFailure: агент не передал profit или fee не был выплачен
        """
        validate_account(agent, "agent")
        validate_positive_amount(profit, "profit")
        kind = AssetKind.parse(kind)
        fee_recipient = self._fee_recipient()

        # 1. Refresh оракула до любой оценки
        self._oracle.refresh(update_data, update_fee)
        latest_price = self._oracle.read_cached()

        fee, accretion = units.split_performance_fee(profit)
        nav_before = self._book.state.nav_per_share

        # 2. Прибыль поступает в vault целиком
        ledger = self._assets[kind]
        ledger.transfer_in(agent, profit)
        uow.on_rollback(ledger.transfer_out, agent, profit)

        self._book.state = self._book.state.with_balance_delta(kind, accretion)

        if kind is AssetKind.VOLATILE:
            profit_value = units.volatile_to_stable(profit, latest_price.price)
            fee_value = units.volatile_to_stable(fee, latest_price.price)
        else:
            profit_value, fee_value = profit, fee
        self._book.totals = self._book.totals.add(
            total_profit_value=profit_value, total_fees_value=fee_value
        )

        # 3. NAV и история
        nav_after = self._valuation.update_nav()
        snapshot = self._history.record(
            timestamp=self._book.state.last_nav_update_time,
            nav_per_share=nav_after,
            total_value=self._valuation.total_value(),
        )

        # 4. Fee: последний внешний эффект
        if fee > 0:
            ledger.transfer_out(fee_recipient, fee)

        self._latest_price = latest_price
        logger.info(
            "Profit returned by %s: %d %s, fee=%d to %s, accretion=%d, nav %d -> %d",
            agent,
            profit,
            kind.value,
            fee,
            fee_recipient,
            accretion,
            nav_before,
            nav_after,
        )
        return ProfitReceipt(
            agent=agent,
            asset=kind,
            profit=profit,
            fee=fee,
            accretion=accretion,
            fee_recipient=fee_recipient,
            nav_before=nav_before,
            nav_after=nav_after,
            snapshot=snapshot,
        )
