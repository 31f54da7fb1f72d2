"""
Products table (global_products): manual additions, search and admin edits.
"""
import logging
from typing import Any, Dict, List, Optional

from beautyscan.parsing.ingredient_parser import split_ingredients_field

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "global_products"


class ProductStore:
    def __init__(self, client: Any, table: str = PRODUCTS_TABLE):
        self._client = client
        self._table = table

    def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        resp = self._client.table(self._table).select("*").eq("id", product_id).limit(1).execute()
        rows = resp.data or []
        return rows[0] if rows else None

    def create(
        self,
        name: str,
        ingredients_text: str,
        brand: Optional[str] = None,
        barcode: Optional[str] = None,
        category: str = "cosmetic",
    ) -> Dict[str, Any]:
        row = {
            "name": name.strip(),
            "brand": (brand or "").strip() or None,
            "barcode": (barcode or "").strip() or None,
            "category": category,
            "ingredients": split_ingredients_field(ingredients_text),
        }
        resp = self._client.table(self._table).insert(row).execute()
        rows = resp.data or []
        logger.info("PRODUCT create name=%s ingredients=%d", row["name"], len(row["ingredients"]))
        return rows[0] if rows else row

    def search(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        q = (query or "").strip()
        if not q:
            return []
        # PostgREST or-filter; commas and parentheses would break its syntax
        safe = q.replace(",", " ").replace("(", " ").replace(")", " ")
        pattern = f"%{safe}%"
        resp = (
            self._client.table(self._table)
            .select("*")
            .or_(f"name.ilike.{pattern},brand.ilike.{pattern},barcode.ilike.{pattern}")
            .limit(limit)
            .execute()
        )
        return resp.data or []

    def list_all(self, limit: int = 200) -> List[Dict[str, Any]]:
        resp = (
            self._client.table(self._table)
            .select("*")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return resp.data or []

    def update(self, product_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply an admin edit. `ingredients_text` is split into the ingredients array."""
        changes: Dict[str, Any] = {}
        if fields.get("name") is not None:
            changes["name"] = fields["name"].strip()
        for key in ("brand", "barcode", "category"):
            if key in fields:
                changes[key] = (fields[key] or "").strip() or None
        if fields.get("ingredients_text") is not None:
            changes["ingredients"] = split_ingredients_field(fields["ingredients_text"])
        if not changes:
            return None
        resp = self._client.table(self._table).update(changes).eq("id", product_id).execute()
        rows = resp.data or []
        return rows[0] if rows else None

    def delete(self, product_id: str) -> None:
        self._client.table(self._table).delete().eq("id", product_id).execute()
        logger.info("PRODUCT delete id=%s", product_id)
