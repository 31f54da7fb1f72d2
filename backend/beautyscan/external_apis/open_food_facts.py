"""
Open Food Facts product lookup by barcode (no key required).
Product: https://world.openfoodfacts.org/api/v0/product/{barcode}.json

Unknown barcode, HTTP error, bad JSON or network failure all mean "not found".
"""
import logging
import re
from typing import Optional

from beautyscan.config import (
    OPEN_FOOD_FACTS_PRODUCT_URL,
    get_open_food_facts_max_retries,
    get_open_food_facts_timeout,
)
from beautyscan.external_apis.base import BarcodeProduct
from beautyscan.external_apis.http_retry import get_with_retries

logger = logging.getLogger(__name__)

_BARCODE_RE = re.compile(r"^\d{6,14}$")


def _clean(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def is_valid_barcode(barcode: str) -> bool:
    return bool(_BARCODE_RE.match((barcode or "").strip()))


def lookup_barcode(barcode: str, timeout: Optional[int] = None) -> Optional[BarcodeProduct]:
    """
    Fetch a product by barcode. Returns None when not found or unreachable.
    """
    code = (barcode or "").strip()
    if not is_valid_barcode(code):
        logger.info("OPEN_FOOD_FACTS invalid barcode=%s", code[:32])
        return None

    url = OPEN_FOOD_FACTS_PRODUCT_URL.format(barcode=code)
    resp, err = get_with_retries(
        url,
        timeout=timeout or get_open_food_facts_timeout(),
        max_retries=get_open_food_facts_max_retries(),
    )
    if err is not None:
        logger.warning("OPEN_FOOD_FACTS fetch failed barcode=%s error=%s", code, err)
        return None
    if not resp.ok:
        logger.info("OPEN_FOOD_FACTS http status=%s barcode=%s", resp.status_code, code)
        return None
    try:
        data = resp.json()
    except ValueError as e:
        logger.warning("OPEN_FOOD_FACTS invalid json barcode=%s error=%s", code, e)
        return None

    if not isinstance(data, dict) or data.get("status") != 1:
        logger.info("OPEN_FOOD_FACTS not found barcode=%s", code)
        return None

    product = data.get("product") or {}
    result = BarcodeProduct(
        barcode=code,
        product_name=_clean(product.get("product_name")),
        brands=_clean(product.get("brands")),
        categories=_clean(product.get("categories")),
        ingredients_text=_clean(product.get("ingredients_text")),
        image_url=_clean(product.get("image_url")),
        raw_response_summary=(
            f"product_name={(product.get('product_name') or '')[:80]} "
            f"brands={(product.get('brands') or '')[:40]}"
        ),
    )
    logger.info(
        "OPEN_FOOD_FACTS found barcode=%s %s has_ingredients=%s",
        code, result.raw_response_summary, bool(result.ingredients_text),
    )
    return result
