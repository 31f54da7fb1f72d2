"""
Label scan pipeline: parse -> match against the catalog -> aggregate.
"""
import logging
from typing import Iterable, List, Optional

from beautyscan.evaluation.risk_aggregator import BucketScheme, aggregate_risk
from beautyscan.matching.matcher import match_ingredients
from beautyscan.models.ingredient import IngredientRecord, ProductAnalysis
from beautyscan.parsing.ingredient_parser import parse_ingredients

logger = logging.getLogger(__name__)


def analyze_ingredient_list(
    names: List[str],
    catalog: Iterable[IngredientRecord],
    product_name: Optional[str] = None,
    brand: Optional[str] = None,
    scheme: BucketScheme = BucketScheme.GRADED,
) -> ProductAnalysis:
    """Analyze names that are already split (e.g. a stored product's ingredient list)."""
    names = [n.strip() for n in names if n and n.strip()]
    matches = match_ingredients(names, catalog)
    summary = aggregate_risk(matches, scheme)
    logger.info(
        "SCAN product=%s ingredients=%d overall=%s scheme=%s",
        (product_name or "-")[:60], len(names), summary.overall_tier.name, scheme.value,
    )
    return ProductAnalysis(
        product_name=product_name,
        brand=brand,
        ingredients=names,
        matches=matches,
        summary=summary,
    )


def analyze_label(
    raw_text: str,
    catalog: Iterable[IngredientRecord],
    product_name: Optional[str] = None,
    brand: Optional[str] = None,
    scheme: BucketScheme = BucketScheme.GRADED,
) -> ProductAnalysis:
    return analyze_ingredient_list(parse_ingredients(raw_text), catalog, product_name, brand, scheme)
