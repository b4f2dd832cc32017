"""
Guard — non-reentrant lock и unit of work для мутирующих операций vault.

NonReentrantGuard: пока выполняется одна мутирующая операция, любая
другая (вложенная из колбэка коллаборатора или конкурентная) отклоняется
ReentrantCall. Ожидания нет.

UnitOfWork: all-or-nothing. На входе снимает снапшот учётного состояния,
операции регистрируют компенсирующие действия для каждого внешнего эффекта
(mint, burn, transfer). При любом исключении компенсации выполняются
в обратном порядке, состояние восстанавливается, исключение пропагирует.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from navvault.core.errors import ReentrantCall
from navvault.engine.book import VaultBook
from navvault.engine.nav_history import NavHistoryLedger

logger = logging.getLogger(__name__)


class NonReentrantGuard:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._operation: str | None = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @property
    def operation(self) -> str | None:
        return self._operation

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise ReentrantCall(
                f"{operation} rejected: {self._operation} is still in progress"
            )
        self._operation = operation
        try:
            yield
        finally:
            self._operation = None
            self._lock.release()


class UnitOfWork:
    """Снапшот + журнал компенсаций одной мутирующей операции."""

    def __init__(self, operation: str, book: VaultBook, history: NavHistoryLedger):
        self.operation = operation
        self._book = book
        self._history = history
        self._book_snapshot = book.snapshot()
        self._history_checkpoint = history.checkpoint()
        self._compensations: list[tuple[Callable[..., Any], tuple[Any, ...]]] = []

    def on_rollback(self, action: Callable[..., Any], *args: Any) -> None:
        """Регистрация компенсирующего действия для уже выполненного внешнего эффекта."""
        self._compensations.append((action, args))

    def rollback(self) -> None:
        for action, args in reversed(self._compensations):
            try:
                action(*args)
            except Exception:
                # Остальные компенсации всё равно должны выполниться
                logger.exception(
                    "Compensation %s%r failed while rolling back %s",
                    getattr(action, "__qualname__", action),
                    args,
                    self.operation,
                )
        self._compensations.clear()
        self._book.restore(self._book_snapshot)
        self._history.rollback(self._history_checkpoint)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            logger.warning("%s rolled back: %s: %s", self.operation, exc_type.__name__, exc)
            self.rollback()
        return False
