"""
Интерфейсы внешних коллабораторов vault.

Механика токенов и хранение ролей вне области ответственности vault:
движок обращается к ним только через эти протоколы.
"""

from typing import Final, Protocol

ADMIN_ROLE: Final[str] = "ADMIN_ROLE"
AGENT_ROLE: Final[str] = "AGENT_ROLE"


class ShareLedgerProtocol(Protocol):
    """Fungible ledger shares. Единственный владелец — Share-Issuance Engine."""

    def mint(self, account: str, amount: int) -> None: ...

    def burn(self, account: str, amount: int) -> None: ...

    def balance_of(self, account: str) -> int: ...

    def total_supply(self) -> int: ...


class AssetLedgerProtocol(Protocol):
    """Перемещение одного вида актива между vault и внешними аккаунтами."""

    def transfer_in(self, sender: str, amount: int) -> None: ...

    def transfer_out(self, recipient: str, amount: int) -> None: ...

    def balance_of(self, account: str) -> int: ...


class AccessControlProtocol(Protocol):
    def has_role(self, role: str, account: str) -> bool: ...
