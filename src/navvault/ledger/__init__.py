"""Ledger — интерфейсы коллабораторов (shares, активы, роли) и их реализации в памяти."""

from .assets import AssetLedger
from .interfaces import (
    ADMIN_ROLE,
    AGENT_ROLE,
    AccessControlProtocol,
    AssetLedgerProtocol,
    ShareLedgerProtocol,
)
from .roles import RoleRegistry
from .shares import ShareLedger

__all__ = [
    "ADMIN_ROLE",
    "AGENT_ROLE",
    "AccessControlProtocol",
    "AssetLedger",
    "AssetLedgerProtocol",
    "RoleRegistry",
    "ShareLedger",
    "ShareLedgerProtocol",
]
