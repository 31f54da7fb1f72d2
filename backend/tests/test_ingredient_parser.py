"""
Unit tests: label parsing (annotations, percentages, empty segments) and the plain product-field split.
Run from backend: python -m pytest tests/test_ingredient_parser.py -v
"""


def test_parse_strips_parentheses_and_percentages():
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    assert parse_ingredients("Aqua, Glycerin (moisturizer), Parfum 2%") == ["Aqua", "Glycerin", "Parfum"]


def test_parse_strips_brackets_and_decimal_percent():
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    out = parse_ingredients("Titanium Dioxide [nano], Zinc Oxide 12.5%, Tocopherol")
    assert out == ["Titanium Dioxide", "Zinc Oxide", "Tocopherol"]


def test_parse_drops_empty_segments():
    """Double commas, trailing commas and annotation-only segments produce nothing."""
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    assert parse_ingredients("Aqua,, Glycerin, (may contain), 5%,") == ["Aqua", "Glycerin"]


def test_parse_empty_or_none():
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    assert parse_ingredients("") == []
    assert parse_ingredients(None) == []
    assert parse_ingredients("   ") == []


def test_parse_preserves_label_order_and_case():
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    out = parse_ingredients("PARFUM, aqua, Linalool")
    assert out == ["PARFUM", "aqua", "Linalool"]


def test_parse_nested_parentheses_one_level():
    """Non-greedy removal leaves the tail of a nested group."""
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    assert parse_ingredients("a (b (c) d)") == ["a  d)"]


def test_parse_is_idempotent_on_clean_output():
    from beautyscan.parsing.ingredient_parser import parse_ingredients
    first = parse_ingredients("Aqua, Glycerin (moisturizer), Parfum 2%, Limonene [allergen]")
    assert parse_ingredients(", ".join(first)) == first


def test_split_ingredients_field_keeps_annotations():
    from beautyscan.parsing.ingredient_parser import split_ingredients_field
    assert split_ingredients_field(" Aqua , Glycerin (veg), ,Parfum ") == ["Aqua", "Glycerin (veg)", "Parfum"]
    assert split_ingredients_field(None) == []
