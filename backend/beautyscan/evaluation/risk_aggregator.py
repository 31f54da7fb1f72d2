"""
Deterministic product risk aggregation over ingredient matches.

Buckets (graded scheme): no record or unrated -> unknown; MODERATE/HIGH -> dangerous;
LOW -> moderate; SAFE -> safe. The binary scheme (single-product detail view)
counts LOW as safe.

Overall tier: any dangerous -> DANGEROUS; >= 2 moderate -> DANGEROUS;
1 moderate -> MODERATE; else SAFE. Not configurable.
"""
from enum import Enum
from typing import Iterable
import logging

from beautyscan.models.hazard import HazardTier, RiskLevel
from beautyscan.models.ingredient import IngredientMatch, ProductRiskSummary

logger = logging.getLogger(__name__)


class BucketScheme(str, Enum):
    GRADED = "graded"
    BINARY = "binary"


def overall_risk(dangerous_count: int, moderate_count: int) -> RiskLevel:
    if dangerous_count > 0:
        return RiskLevel.DANGEROUS
    if moderate_count >= 2:
        return RiskLevel.DANGEROUS
    if moderate_count >= 1:
        return RiskLevel.MODERATE
    return RiskLevel.SAFE


def aggregate_risk(
    matches: Iterable[IngredientMatch],
    scheme: BucketScheme = BucketScheme.GRADED,
) -> ProductRiskSummary:
    dangerous = moderate = safe = unknown = 0
    for m in matches:
        tier = m.record.hazard_tier if m.record is not None else None
        if tier is None:
            unknown += 1
        elif tier in (HazardTier.MODERATE, HazardTier.HIGH):
            dangerous += 1
        elif tier == HazardTier.LOW and scheme == BucketScheme.GRADED:
            moderate += 1
        else:
            safe += 1

    summary = ProductRiskSummary(
        dangerous_count=dangerous,
        moderate_count=moderate,
        safe_count=safe,
        unknown_count=unknown,
        overall_tier=overall_risk(dangerous, moderate),
    )
    logger.debug(
        "RISK scheme=%s dangerous=%d moderate=%d safe=%d unknown=%d overall=%s",
        scheme.value, dangerous, moderate, safe, unknown, summary.overall_tier.name,
    )
    return summary
