"""
Domain models and value objects.

Contains fundamental vault entities: VaultState, UserPosition, PriceReading,
NavSnapshot, VaultStats and the unit conversions between them.
"""

from navvault.core.domain.position import UserPosition
from navvault.core.domain.price import PriceReading
from navvault.core.domain.units import (
    PERFORMANCE_FEE_BPS,
    AssetKind,
    price_per_share,
    shares_for_value,
    split_performance_fee,
    stable_to_volatile,
    value_for_shares,
    volatile_to_stable,
)
from navvault.core.domain.vault_state import NavSnapshot, VaultState, VaultStats

__all__ = [
    # Units module
    "PERFORMANCE_FEE_BPS",
    "AssetKind",
    "price_per_share",
    "shares_for_value",
    "split_performance_fee",
    "stable_to_volatile",
    "value_for_shares",
    "volatile_to_stable",
    # Position model
    "UserPosition",
    # Price model
    "PriceReading",
    # Vault state models
    "NavSnapshot",
    "VaultState",
    "VaultStats",
]
