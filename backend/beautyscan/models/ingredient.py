"""
Catalog ingredient record, per-name match, and product risk summary.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from beautyscan.models.hazard import HazardTier, RiskLevel, TierScheme, hazard_tier_from_legacy


@dataclass(frozen=True)
class IngredientRecord:
    name: str
    hazard_tier: Optional[HazardTier] = None
    category: Optional[str] = None
    description: Optional[str] = None
    id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "hazard_tier": int(self.hazard_tier) if self.hazard_tier is not None else None,
            "hazard_label": self.hazard_tier.label if self.hazard_tier is not None else "Non évalué",
            "category": self.category,
            "description": self.description,
        }

    @classmethod
    def from_row(cls, row: dict, scheme: TierScheme = TierScheme.GRADED) -> "IngredientRecord":
        """Build from a catalog row. Accepts `hazard_tier` or the older `danger_level` column."""
        raw_tier: Any = row.get("hazard_tier")
        if raw_tier is None:
            raw_tier = row.get("danger_level")
        row_id = row.get("id")
        return cls(
            name=str(row.get("name") or "").strip(),
            hazard_tier=hazard_tier_from_legacy(raw_tier, scheme),
            category=row.get("category"),
            description=row.get("description"),
            id=str(row_id) if row_id is not None else None,
        )


@dataclass(frozen=True)
class IngredientMatch:
    raw_name: str
    record: Optional[IngredientRecord] = None

    @property
    def matched(self) -> bool:
        return self.record is not None

    def to_dict(self) -> dict:
        return {
            "raw_name": self.raw_name,
            "record": self.record.to_dict() if self.record is not None else None,
        }


@dataclass(frozen=True)
class ProductRiskSummary:
    dangerous_count: int = 0
    moderate_count: int = 0
    safe_count: int = 0
    unknown_count: int = 0
    overall_tier: RiskLevel = RiskLevel.SAFE

    @property
    def total(self) -> int:
        return self.dangerous_count + self.moderate_count + self.safe_count + self.unknown_count

    def to_dict(self) -> dict:
        return {
            "dangerous_count": self.dangerous_count,
            "moderate_count": self.moderate_count,
            "safe_count": self.safe_count,
            "unknown_count": self.unknown_count,
            "overall_tier": int(self.overall_tier),
            "overall_label": self.overall_tier.label,
        }


@dataclass
class ProductAnalysis:
    """Scan output: parsed names, their matches, and the aggregated summary."""
    product_name: Optional[str]
    brand: Optional[str]
    ingredients: List[str] = field(default_factory=list)
    matches: List[IngredientMatch] = field(default_factory=list)
    summary: ProductRiskSummary = field(default_factory=ProductRiskSummary)

    def to_dict(self) -> dict:
        return {
            "product_name": self.product_name,
            "brand": self.brand,
            "ingredients": list(self.ingredients),
            "matches": [m.to_dict() for m in self.matches],
            "summary": self.summary.to_dict(),
        }
