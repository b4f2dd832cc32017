"""Engine — оценка, выпуск/погашение shares, распределение прибыли, NAV history."""

from .book import VaultBook, VaultTotals
from .guard import NonReentrantGuard, UnitOfWork
from .issuance import (
    DepositPreview,
    DepositReceipt,
    ShareIssuanceEngine,
    WithdrawalPreview,
    WithdrawalReceipt,
)
from .nav_history import DEFAULT_HISTORY_CAPACITY, NavHistoryLedger
from .profit import ProfitDistributionEngine, ProfitReceipt
from .valuation import Valuation, ValuationEngine

__all__ = [
    "DEFAULT_HISTORY_CAPACITY",
    "DepositPreview",
    "DepositReceipt",
    "NavHistoryLedger",
    "NonReentrantGuard",
    "ProfitDistributionEngine",
    "ProfitReceipt",
    "ShareIssuanceEngine",
    "UnitOfWork",
    "Valuation",
    "ValuationEngine",
    "VaultBook",
    "VaultTotals",
    "WithdrawalPreview",
    "WithdrawalReceipt",
]
