"""
Unit tests: hazard tier conversion, catalog matching, and product risk aggregation.
Run from backend: python -m pytest tests/test_matching_and_risk.py -v
"""
import itertools

import pytest


def _rec(name, tier):
    from beautyscan.models.hazard import HazardTier
    from beautyscan.models.ingredient import IngredientRecord
    return IngredientRecord(name=name, hazard_tier=HazardTier(tier) if tier is not None else None)


def _match(tier):
    from beautyscan.models.ingredient import IngredientMatch
    if tier == "unknown":
        return IngredientMatch(raw_name="x", record=None)
    return IngredientMatch(raw_name="x", record=_rec("x", tier))


# --- Hazard tiers ---

def test_legacy3_maps_onto_graded_scale():
    from beautyscan.models.hazard import HazardTier, TierScheme, hazard_tier_from_legacy
    assert hazard_tier_from_legacy(0, TierScheme.LEGACY3) == HazardTier.SAFE
    assert hazard_tier_from_legacy(1, TierScheme.LEGACY3) == HazardTier.LOW
    assert hazard_tier_from_legacy("2", TierScheme.LEGACY3) == HazardTier.HIGH
    assert hazard_tier_from_legacy(3, TierScheme.LEGACY3) is None


def test_graded_accepts_strings_and_rejects_garbage():
    from beautyscan.models.hazard import HazardTier, hazard_tier_from_legacy
    assert hazard_tier_from_legacy("3") == HazardTier.HIGH
    assert hazard_tier_from_legacy(" 1 ") == HazardTier.LOW
    assert hazard_tier_from_legacy(None) is None
    assert hazard_tier_from_legacy("high") is None
    assert hazard_tier_from_legacy(7) is None
    assert hazard_tier_from_legacy(True) is None


def test_hazard_tier_to_legacy3():
    from beautyscan.models.hazard import HazardTier, hazard_tier_to_legacy3
    assert [hazard_tier_to_legacy3(t) for t in HazardTier] == [0, 1, 2, 2]


def test_record_from_row_uses_danger_level_fallback():
    from beautyscan.models.hazard import HazardTier
    from beautyscan.models.ingredient import IngredientRecord
    rec = IngredientRecord.from_row({"id": 12, "name": " Parfum ", "danger_level": "2"})
    assert rec.name == "Parfum"
    assert rec.id == "12"
    assert rec.hazard_tier == HazardTier.MODERATE
    assert rec.to_dict()["hazard_label"] == "Modéré"


# --- Matcher ---

def test_match_case_insensitive_substring_both_ways():
    from beautyscan.matching.matcher import match_ingredients
    catalog = [_rec("parfum", 2), _rec("sodium hyaluronate", 0)]
    matches = match_ingredients(["PARFUM (fragrance)", "Hyaluronate"], catalog)
    assert matches[0].record.name == "parfum"
    assert matches[1].record.name == "sodium hyaluronate"


def test_match_first_catalog_record_wins():
    from beautyscan.matching.matcher import match_ingredients
    catalog = [_rec("aqua", 0), _rec("aqua extract", 3)]
    assert match_ingredients(["Aqua Extract"], catalog)[0].record.name == "aqua"
    catalog.reverse()
    assert match_ingredients(["Aqua Extract"], catalog)[0].record.name == "aqua extract"


def test_match_unknown_and_empty_names():
    from beautyscan.matching.matcher import match_ingredients
    catalog = [_rec("aqua", 0), _rec("", 3)]
    matches = match_ingredients(["Mystery Extract", "   "], catalog)
    assert [m.matched for m in matches] == [False, False]


def test_match_preserves_input_order_and_length():
    from beautyscan.matching.matcher import match_ingredients
    names = ["Parfum", "Unknown", "Aqua", "Parfum"]
    matches = match_ingredients(names, [_rec("aqua", 0), _rec("parfum", 2)])
    assert [m.raw_name for m in matches] == names


# --- Aggregator ---

def test_label_with_parfum_is_dangerous():
    """Aqua (0), Glycerin (0), Parfum (2) -> one dangerous, overall DANGEROUS."""
    from beautyscan.evaluation.risk_aggregator import aggregate_risk
    from beautyscan.matching.matcher import match_ingredients
    from beautyscan.models.hazard import RiskLevel
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    catalog = [_rec("aqua", 0), _rec("glycerin", 0), _rec("parfum", 2)]
    names = parse_ingredients("Aqua, Glycerin (moisturizer), Parfum 2%")
    summary = aggregate_risk(match_ingredients(names, catalog))
    assert (summary.dangerous_count, summary.moderate_count, summary.safe_count, summary.unknown_count) == (1, 0, 2, 0)
    assert summary.overall_tier == RiskLevel.DANGEROUS


@pytest.mark.parametrize(
    "tiers, expected",
    [
        ([], "SAFE"),
        ([0, 0, "unknown"], "SAFE"),
        ([1], "MODERATE"),
        ([1, 1], "DANGEROUS"),
        ([0, 2], "DANGEROUS"),
        ([3, "unknown"], "DANGEROUS"),
        ([None], "SAFE"),
    ],
)
def test_overall_tier_policy(tiers, expected):
    from beautyscan.evaluation.risk_aggregator import aggregate_risk
    from beautyscan.models.hazard import RiskLevel
    summary = aggregate_risk([_match(t) for t in tiers])
    assert summary.overall_tier == RiskLevel[expected]


def test_unrated_record_counts_as_unknown():
    from beautyscan.evaluation.risk_aggregator import aggregate_risk
    summary = aggregate_risk([_match(None), _match("unknown")])
    assert summary.unknown_count == 2


def test_counts_sum_to_number_of_matches():
    from beautyscan.evaluation.risk_aggregator import aggregate_risk
    tiers = [0, 1, 2, 3, None, "unknown", 1, 0]
    summary = aggregate_risk([_match(t) for t in tiers])
    assert summary.total == len(tiers)


def test_aggregation_is_order_independent():
    from beautyscan.evaluation.risk_aggregator import aggregate_risk
    tiers = [0, 1, 2, "unknown"]
    results = {aggregate_risk([_match(t) for t in perm]) for perm in itertools.permutations(tiers)}
    assert len(results) == 1


def test_raising_a_tier_never_lowers_overall():
    from beautyscan.evaluation.risk_aggregator import aggregate_risk
    base = [0, 0, 1]
    before = aggregate_risk([_match(t) for t in base]).overall_tier
    for i in range(len(base)):
        for higher in range(base[i] + 1, 4):
            raised = list(base)
            raised[i] = higher
            assert aggregate_risk([_match(t) for t in raised]).overall_tier >= before


def test_binary_scheme_counts_low_as_safe():
    from beautyscan.evaluation.risk_aggregator import BucketScheme, aggregate_risk
    from beautyscan.models.hazard import RiskLevel
    summary = aggregate_risk([_match(1), _match(1), _match(0)], BucketScheme.BINARY)
    assert summary.moderate_count == 0
    assert summary.safe_count == 3
    assert summary.overall_tier == RiskLevel.SAFE


def test_analyze_label_with_seed_catalog():
    from beautyscan.catalog.catalog_store import JsonFileCatalog
    from beautyscan.models.hazard import RiskLevel
    from beautyscan.scan_service import analyze_label
    catalog = JsonFileCatalog()
    if not len(catalog):
        pytest.skip("seed catalog not found")
    analysis = analyze_label("Aqua, Glycerin, Niacinamide", catalog.fetch_all(), product_name="Sérum")
    assert analysis.ingredients == ["Aqua", "Glycerin", "Niacinamide"]
    assert analysis.summary.overall_tier == RiskLevel.SAFE
    body = analysis.to_dict()
    assert body["summary"]["overall_label"] == "Sûr"
    assert len(body["matches"]) == 3
