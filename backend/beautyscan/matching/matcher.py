"""
Match free-text ingredient names against the hazard catalog.

A catalog record matches a name when, after lowercase + trim, either string
contains the other. Substring containment is not injective ("aqua" vs
"aqua extract"), so catalog order is significant: the first matching record
in iteration order wins.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from beautyscan.models.ingredient import IngredientMatch, IngredientRecord

logger = logging.getLogger(__name__)


def normalize_name(name: Optional[str]) -> str:
    return (name or "").lower().strip()


def _names_overlap(a: str, b: str) -> bool:
    return a in b or b in a


def find_record(
    name: str,
    catalog: Sequence[Tuple[str, IngredientRecord]],
) -> Optional[IngredientRecord]:
    """First record whose normalized name overlaps `name`. `catalog` is pre-normalized."""
    key = normalize_name(name)
    if not key:
        return None
    for record_key, record in catalog:
        if _names_overlap(key, record_key):
            return record
    return None


def _prepare_catalog(catalog: Iterable[IngredientRecord]) -> List[Tuple[str, IngredientRecord]]:
    prepared = []
    for record in catalog:
        key = normalize_name(record.name)
        if key:
            prepared.append((key, record))
    return prepared


def match_ingredients(
    names: Sequence[str],
    catalog: Iterable[IngredientRecord],
) -> List[IngredientMatch]:
    """
    One IngredientMatch per input name, same order. record=None when nothing matches.
    """
    prepared = _prepare_catalog(catalog)
    matches = [IngredientMatch(raw_name=name, record=find_record(name, prepared)) for name in names]
    matched = sum(1 for m in matches if m.record is not None)
    logger.info(
        "MATCH names=%d catalog=%d matched=%d unknown=%d",
        len(names), len(prepared), matched, len(matches) - matched,
    )
    return matches
