"""
navvault — vault с пропорциональным владением на основе NAV.

Пользователи вносят stable или volatile актив и получают shares
пропорционально USD-стоимости вклада. Агенты выводят средства vault
во внешние стратегии и возвращают прибыль; performance fee 20% уходит
получателю fee, остаток повышает NAV на share для всех держателей.
"""

from .config import VaultConfig, VaultSettings, configure_logging
from .core.domain.units import AssetKind
from .vault import Vault

__version__ = "0.1.0"

__all__ = [
    "AssetKind",
    "Vault",
    "VaultConfig",
    "VaultSettings",
    "configure_logging",
]
