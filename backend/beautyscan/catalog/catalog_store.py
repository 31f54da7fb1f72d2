"""
Ingredient catalog backends.
- SupabaseIngredientCatalog: reads/writes the catalog table (default).
- JsonFileCatalog: read-only seed file data/ingredient_catalog.json (set CATALOG_BACKEND=file).
Iteration order is the table order and is significant for matching.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from beautyscan.config import get_catalog_backend, get_catalog_table, get_seed_catalog_path
from beautyscan.models.hazard import HazardTier, TierScheme
from beautyscan.models.ingredient import IngredientRecord

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "hazard_tier", "category", "description")


class ReadOnlyCatalogError(RuntimeError):
    pass


def record_to_row(record: IngredientRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "hazard_tier": int(record.hazard_tier) if record.hazard_tier is not None else None,
        "category": record.category,
        "description": record.description,
    }


class SupabaseIngredientCatalog:
    def __init__(self, client: Any, table: Optional[str] = None, scheme: TierScheme = TierScheme.GRADED):
        self._client = client
        self._table = table or get_catalog_table()
        self._scheme = scheme

    def _rows_to_records(self, rows: Optional[List[dict]]) -> List[IngredientRecord]:
        return [IngredientRecord.from_row(r, self._scheme) for r in (rows or [])]

    def fetch_all(self) -> List[IngredientRecord]:
        """Whole table; the matcher needs every record client-side."""
        resp = self._client.table(self._table).select("*").execute()
        records = self._rows_to_records(resp.data)
        logger.info("CATALOG fetch_all table=%s records=%d", self._table, len(records))
        return records

    def search(self, query: str, limit: int = 10) -> List[IngredientRecord]:
        q = (query or "").strip()
        if not q:
            return []
        resp = self._client.table(self._table).select("*").ilike("name", f"%{q}%").limit(limit).execute()
        return self._rows_to_records(resp.data)

    def get_by_names(self, names: List[str]) -> List[IngredientRecord]:
        if not names:
            return []
        resp = self._client.table(self._table).select("*").in_("name", list(names)).execute()
        return self._rows_to_records(resp.data)

    def create(self, record: IngredientRecord) -> IngredientRecord:
        resp = self._client.table(self._table).insert(record_to_row(record)).execute()
        rows = self._rows_to_records(resp.data)
        logger.info("CATALOG create name=%s tier=%s", record.name, record.hazard_tier)
        return rows[0] if rows else record

    def update(self, record_id: str, fields: Dict[str, Any]) -> Optional[IngredientRecord]:
        patch = {k: v for k, v in fields.items() if k in _EDITABLE_FIELDS}
        if isinstance(patch.get("hazard_tier"), HazardTier):
            patch["hazard_tier"] = int(patch["hazard_tier"])
        if not patch:
            return None
        resp = self._client.table(self._table).update(patch).eq("id", record_id).execute()
        rows = self._rows_to_records(resp.data)
        logger.info("CATALOG update id=%s fields=%s", record_id, list(patch.keys()))
        return rows[0] if rows else None

    def delete(self, record_id: str) -> None:
        self._client.table(self._table).delete().eq("id", record_id).execute()
        logger.info("CATALOG delete id=%s", record_id)


class JsonFileCatalog:
    """Read-only catalog from a JSON file: {"catalog_version": ..., "ingredients": [rows]}."""

    def __init__(self, path: Optional[Path] = None, scheme: TierScheme = TierScheme.GRADED):
        self._path = path or get_seed_catalog_path()
        self._scheme = scheme
        self._version = "0"
        self._records: List[IngredientRecord] = []
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            logger.warning("CATALOG seed file not found path=%s", self._path)
            return
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        self._version = str(data.get("catalog_version", "0"))
        self._records = [IngredientRecord.from_row(r, self._scheme) for r in data.get("ingredients", [])]
        logger.info("CATALOG loaded file=%s records=%d version=%s", self._path.name, len(self._records), self._version)

    def __len__(self) -> int:
        return len(self._records)

    def get_version(self) -> str:
        return self._version

    def fetch_all(self) -> List[IngredientRecord]:
        return list(self._records)

    def search(self, query: str, limit: int = 10) -> List[IngredientRecord]:
        q = (query or "").strip().lower()
        if not q:
            return []
        return [r for r in self._records if q in r.name.lower()][:limit]

    def get_by_names(self, names: List[str]) -> List[IngredientRecord]:
        wanted = set(names or [])
        return [r for r in self._records if r.name in wanted]

    def create(self, record: IngredientRecord) -> IngredientRecord:
        raise ReadOnlyCatalogError("The file catalog is read-only")

    def update(self, record_id: str, fields: Dict[str, Any]) -> Optional[IngredientRecord]:
        raise ReadOnlyCatalogError("The file catalog is read-only")

    def delete(self, record_id: str) -> None:
        raise ReadOnlyCatalogError("The file catalog is read-only")


def build_catalog(client_factory=None):
    """Catalog for the configured backend. `client_factory` returns a Supabase client."""
    if get_catalog_backend() == "file":
        return JsonFileCatalog()
    if client_factory is None:
        from beautyscan.storage.supabase_client import get_supabase_client
        client_factory = get_supabase_client
    return SupabaseIngredientCatalog(client_factory())
