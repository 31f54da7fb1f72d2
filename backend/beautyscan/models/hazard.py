"""
Canonical hazard scale for catalog ingredients and the overall product risk level.

Stored catalogs carry tiers in two historical encodings:
- "graded" (4 levels): 0 safe, 1 low, 2 moderate, 3 high.
- "legacy3" (3 levels): 0 safe, 1 moderate, 2 dangerous.
Both are converted here, never re-derived by callers.
"""
from enum import Enum, IntEnum
from typing import Any, Optional


class HazardTier(IntEnum):
    SAFE = 0
    LOW = 1
    MODERATE = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    HazardTier.SAFE: "Sûr",
    HazardTier.LOW: "Attention",
    HazardTier.MODERATE: "Modéré",
    HazardTier.HIGH: "Élevé",
}


class RiskLevel(IntEnum):
    """Overall product risk badge."""
    SAFE = 0
    MODERATE = 1
    DANGEROUS = 2

    @property
    def label(self) -> str:
        return {RiskLevel.SAFE: "Sûr", RiskLevel.MODERATE: "Modéré", RiskLevel.DANGEROUS: "Dangereux"}[self]


class TierScheme(str, Enum):
    GRADED = "graded"
    LEGACY3 = "legacy3"


# legacy3 value -> canonical tier
_LEGACY3_TO_TIER = {
    0: HazardTier.SAFE,
    1: HazardTier.LOW,
    2: HazardTier.HIGH,
}


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)
    return None


def hazard_tier_from_legacy(value: Any, scheme: TierScheme = TierScheme.GRADED) -> Optional[HazardTier]:
    """
    Convert a stored tier ("0".."3", 0..3) to HazardTier.
    Returns None for absent or unparseable values; those are treated as unrated.
    """
    n = _coerce_int(value)
    if n is None:
        return None
    if scheme == TierScheme.LEGACY3:
        return _LEGACY3_TO_TIER.get(n)
    try:
        return HazardTier(n)
    except ValueError:
        return None


def hazard_tier_to_legacy3(tier: HazardTier) -> int:
    """Inverse view for clients still rendering the 3-level badge."""
    if tier in (HazardTier.MODERATE, HazardTier.HIGH):
        return 2
    if tier == HazardTier.LOW:
        return 1
    return 0
