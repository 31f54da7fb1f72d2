"""
Split a raw ingredient label into ingredient names.
- Split on commas.
- Drop parenthetical / bracketed content and percentage annotations.
Nested parentheses are stripped one level only: "a (b (c) d)" keeps the trailing " d)".
"""
import re
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

_PARENS = re.compile(r"\(.*?\)")
_BRACKETS = re.compile(r"\[.*?\]")
_PERCENT = re.compile(r"\d+\.?\d*%")


def clean_segment(segment: str) -> str:
    """Strip annotations from one comma-separated segment."""
    s = segment.strip()
    s = _PARENS.sub("", s)
    s = _BRACKETS.sub("", s)
    s = _PERCENT.sub("", s)
    return s.strip()


def parse_ingredients(raw_text: Optional[str]) -> List[str]:
    """
    Parse a raw label string into an ordered list of ingredient names.
    'Aqua, Glycerin (moisturizer), Parfum 2%' -> ['Aqua', 'Glycerin', 'Parfum']
    """
    if not raw_text or not isinstance(raw_text, str):
        return []
    out: List[str] = []
    for segment in raw_text.split(","):
        name = clean_segment(segment)
        if name:
            out.append(name)
    logger.debug("PARSE segments=%d ingredients=%d", raw_text.count(",") + 1, len(out))
    return out


def split_ingredients_field(raw_text: Optional[str]) -> List[str]:
    """
    Plain comma split with trim, no annotation stripping.
    Used when storing a product's ingredient list as typed by the user.
    """
    if not raw_text:
        return []
    return [part.strip() for part in raw_text.split(",") if part.strip()]
