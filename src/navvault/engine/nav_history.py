"""
NAV History Ledger — ограниченный append-only журнал снапшотов NAV

Ring buffer фиксированной ёмкости (default 100): при переполнении
вытесняется самая старая запись. Единственный наблюдаемый контракт —
хронологический порядок чтения (от старых к новым).
"""

from collections import deque
from typing import Iterator

from navvault.core.contracts import NAV_SNAPSHOT, contract
from navvault.core.domain.vault_state import NavSnapshot
from navvault.core.math.numerical_safeguards import validate_in_range

DEFAULT_HISTORY_CAPACITY = 100


class NavHistoryLedger:
    """Журнал NavSnapshot с вытеснением самых старых записей."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        validate_in_range(capacity, "capacity", min_value=1)
        self._entries: deque[NavSnapshot] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[NavSnapshot]:
        return iter(self._entries)

    def append(self, snapshot: NavSnapshot) -> None:
        """Добавление записи; при полной ёмкости самая старая вытесняется."""
        self._entries.append(snapshot)

    def record(self, timestamp: int, nav_per_share: int, total_value: int) -> NavSnapshot:
        snapshot = NavSnapshot(
            timestamp=timestamp, nav_per_share=nav_per_share, total_value=total_value
        )
        self.append(snapshot)
        return snapshot

    def latest(self) -> NavSnapshot | None:
        return self._entries[-1] if self._entries else None

    def page(self, offset: int = 0, limit: int | None = None) -> list[NavSnapshot]:
        """
        Страница истории в хронологическом порядке.

        Args:
            offset: Количество пропускаемых самых старых записей
            limit: Максимальный размер страницы (None — до конца)
        """
        validate_in_range(offset, "offset", min_value=0)
        if limit is not None:
            validate_in_range(limit, "limit", min_value=0)

        entries = list(self._entries)[offset:]
        return entries if limit is None else entries[:limit]

    def export(self) -> list[dict]:
        """
        История в виде списка dict, каждый проверен по контракту nav_snapshot.

        Raises:
            jsonschema.ValidationError: Запись не соответствует контракту
        """
        validator = contract(NAV_SNAPSHOT)
        return [validator.export(entry) for entry in self._entries]

    # -------------------------------------------------------------------------
    # Снапшот для отката
    # -------------------------------------------------------------------------

    def checkpoint(self) -> list[NavSnapshot]:
        return list(self._entries)

    def rollback(self, checkpoint: list[NavSnapshot]) -> None:
        self._entries.clear()
        self._entries.extend(checkpoint)
