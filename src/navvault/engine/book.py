"""
VaultBook — изменяемый контейнер учётного состояния vault.

Хранит только immutable значения (VaultState, UserPosition, VaultTotals):
любая мутация — замена значения целиком, поэтому снапшот для отката
сводится к копированию ссылок.
"""

from dataclasses import dataclass, field, replace

from navvault.core.domain.position import UserPosition
from navvault.core.domain.vault_state import VaultState


@dataclass(frozen=True)
class VaultTotals:
    """Накопительные счётчики vault (USD, 6 знаков)."""

    total_deposited_value: int = 0
    total_withdrawn_value: int = 0
    total_profit_value: int = 0
    total_fees_value: int = 0

    def add(self, **deltas: int) -> "VaultTotals":
        return replace(self, **{name: getattr(self, name) + delta for name, delta in deltas.items()})


@dataclass(frozen=True)
class BookSnapshot:
    state: VaultState
    positions: dict[str, UserPosition]
    totals: VaultTotals


@dataclass
class VaultBook:
    state: VaultState = field(default_factory=VaultState)
    positions: dict[str, UserPosition] = field(default_factory=dict)
    totals: VaultTotals = field(default_factory=VaultTotals)

    def snapshot(self) -> BookSnapshot:
        return BookSnapshot(state=self.state, positions=dict(self.positions), totals=self.totals)

    def restore(self, snapshot: BookSnapshot) -> None:
        self.state = snapshot.state
        self.positions = dict(snapshot.positions)
        self.totals = snapshot.totals

    @property
    def total_users(self) -> int:
        return len(self.positions)

    @property
    def active_users(self) -> int:
        # Производное значение, единственный источник: карта позиций
        return sum(1 for position in self.positions.values() if position.active)
