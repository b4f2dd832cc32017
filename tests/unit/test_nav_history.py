"""
Тесты для NAV History Ledger

Проверяет:
1. Хронологический порядок чтения
2. Вытеснение самых старых записей при переполнении (default 100)
3. Пагинацию
4. Checkpoint / rollback
5. Экспорт по контракту nav_snapshot
"""

import pytest
from jsonschema import ValidationError

from navvault.core.contracts import validate_nav_snapshot
from navvault.core.domain.vault_state import NavSnapshot
from navvault.core.errors import InvalidInput
from navvault.engine.nav_history import DEFAULT_HISTORY_CAPACITY, NavHistoryLedger


def fill(history: NavHistoryLedger, count: int, start: int = 0) -> None:
    for i in range(start, start + count):
        history.record(timestamp=1_700_000_000 + i, nav_per_share=10**18 + i, total_value=i)


class TestNavHistoryLedger:
    def test_default_capacity(self) -> None:
        assert DEFAULT_HISTORY_CAPACITY == 100
        assert NavHistoryLedger().capacity == 100

    def test_empty(self) -> None:
        history = NavHistoryLedger()

        assert len(history) == 0
        assert history.latest() is None
        assert history.page() == []

    def test_chronological_order(self) -> None:
        history = NavHistoryLedger()
        fill(history, 5)

        assert [entry.total_value for entry in history] == [0, 1, 2, 3, 4]
        assert history.latest().total_value == 4

    def test_eviction_at_capacity(self) -> None:
        """101-я запись вытесняет самую старую"""
        history = NavHistoryLedger()
        fill(history, 101)

        assert len(history) == 100
        entries = history.page()
        assert entries[0].total_value == 1
        assert entries[-1].total_value == 100

    def test_small_capacity_keeps_most_recent(self) -> None:
        history = NavHistoryLedger(capacity=3)
        fill(history, 10)

        assert [entry.total_value for entry in history] == [7, 8, 9]

    def test_invalid_capacity(self) -> None:
        with pytest.raises(InvalidInput):
            NavHistoryLedger(capacity=0)


class TestPagination:
    @pytest.fixture
    def history(self) -> NavHistoryLedger:
        history = NavHistoryLedger()
        fill(history, 10)
        return history

    def test_offset_and_limit(self, history: NavHistoryLedger) -> None:
        page = history.page(offset=2, limit=3)
        assert [entry.total_value for entry in page] == [2, 3, 4]

    def test_limit_past_end(self, history: NavHistoryLedger) -> None:
        assert len(history.page(offset=8, limit=10)) == 2

    def test_offset_past_end(self, history: NavHistoryLedger) -> None:
        assert history.page(offset=50) == []

    def test_zero_limit(self, history: NavHistoryLedger) -> None:
        assert history.page(limit=0) == []

    def test_negative_arguments_rejected(self, history: NavHistoryLedger) -> None:
        with pytest.raises(InvalidInput):
            history.page(offset=-1)

        with pytest.raises(InvalidInput):
            history.page(limit=-1)


class TestCheckpoint:
    def test_rollback_restores_entries(self) -> None:
        history = NavHistoryLedger(capacity=3)
        fill(history, 3)
        checkpoint = history.checkpoint()

        fill(history, 2, start=100)
        history.rollback(checkpoint)

        assert [entry.total_value for entry in history] == [0, 1, 2]
        assert history.capacity == 3

    def test_export_matches_contract(self) -> None:
        history = NavHistoryLedger()
        fill(history, 3)

        exported = history.export()
        assert len(exported) == 3
        for entry in exported:
            validate_nav_snapshot(entry)

    def test_export_rejects_entry_outside_contract(self) -> None:
        class AnnotatedSnapshot(NavSnapshot):
            note: str = "manual"

        history = NavHistoryLedger()
        fill(history, 1)
        history.append(AnnotatedSnapshot(timestamp=1, nav_per_share=10**18, total_value=1))

        with pytest.raises(ValidationError, match="Additional properties"):
            history.export()
