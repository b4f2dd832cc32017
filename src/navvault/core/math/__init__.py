"""
Core math modules для navvault

Целочисленные fixed-point примитивы с гарантией отсутствия потери точности
на пути повышения точности и floor-усечения на пути понижения.
"""

# Numerical Safeguards
from navvault.core.math.numerical_safeguards import (
    # Constants
    BPS_DENOMINATOR,
    MAX_SCALE_EXPONENT,
    UINT256_MAX,
    # Safe division
    mul_div,
    # Powers and saturation
    pow10_capped,
    saturate,
    saturating_mul,
    # Basis points
    bps_of,
    # Validation
    is_valid_amount,
    validate_account,
    validate_in_range,
    validate_non_negative_amount,
    validate_positive_amount,
)

# Decimal Scaler
from navvault.core.math.decimal_scaler import (
    ONE_SHARE,
    ONE_USD_PRICE,
    ONE_VOLATILE,
    PRICE_DECIMALS,
    SHARE_DECIMALS,
    STABLE_DECIMALS,
    VOLATILE_DECIMALS,
    FixedPoint,
    scale_amount,
    shares_to_stable_precision,
    stable_to_shares_precision,
)

__all__ = [
    # Numerical Safeguards: Constants
    "BPS_DENOMINATOR",
    "MAX_SCALE_EXPONENT",
    "UINT256_MAX",
    # Numerical Safeguards: Safe division
    "mul_div",
    # Numerical Safeguards: Powers and saturation
    "pow10_capped",
    "saturate",
    "saturating_mul",
    # Numerical Safeguards: Basis points
    "bps_of",
    # Numerical Safeguards: Validation
    "is_valid_amount",
    "validate_account",
    "validate_in_range",
    "validate_non_negative_amount",
    "validate_positive_amount",
    # Decimal Scaler: Constants
    "ONE_SHARE",
    "ONE_USD_PRICE",
    "ONE_VOLATILE",
    "PRICE_DECIMALS",
    "SHARE_DECIMALS",
    "STABLE_DECIMALS",
    "VOLATILE_DECIMALS",
    # Decimal Scaler: Types
    "FixedPoint",
    # Decimal Scaler: Functions
    "scale_amount",
    "shares_to_stable_precision",
    "stable_to_shares_precision",
]
