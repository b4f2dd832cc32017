"""
Contract Validation Module

Модуль для валидации JSON контрактов экспортируемых снапшотов vault.
"""

from .validators import (
    NAV_SNAPSHOT,
    USER_POSITION,
    VAULT_STATS,
    ContractValidator,
    SchemaLoader,
    contract,
    validate_nav_snapshot,
    validate_user_position,
    validate_vault_stats,
)

__all__ = [
    # Schema names
    "NAV_SNAPSHOT",
    "USER_POSITION",
    "VAULT_STATS",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "contract",
    "validate_nav_snapshot",
    "validate_user_position",
    "validate_vault_stats",
]
