"""
Care routines table (routines): steps grouped by routine type, managed by admins.
"""
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

ROUTINES_TABLE = "routines"

_EDITABLE = ("title", "description", "step", "routine_type", "order_index", "recommended_for")


def _editable(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k in _EDITABLE}


class RoutineStore:
    def __init__(self, client: Any, table: str = ROUTINES_TABLE):
        self._client = client
        self._table = table

    def list_all(
        self,
        routine_type: Optional[str] = None,
        recommended_for: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Routines ordered by type, then by step position within the type."""
        query = self._client.table(self._table).select("*")
        if routine_type:
            query = query.eq("routine_type", routine_type)
        if recommended_for:
            query = query.contains("recommended_for", [recommended_for])
        resp = query.order("routine_type").order("order_index").execute()
        return resp.data or []

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        row = _editable(fields)
        row.setdefault("order_index", 0)
        resp = self._client.table(self._table).insert(row).execute()
        rows = resp.data or []
        logger.info("ROUTINE create type=%s title=%s", row.get("routine_type"), (row.get("title") or "")[:60])
        return rows[0] if rows else row

    def update(self, routine_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        changes = _editable(fields)
        if not changes:
            return None
        resp = self._client.table(self._table).update(changes).eq("id", routine_id).execute()
        rows = resp.data or []
        return rows[0] if rows else None

    def delete(self, routine_id: str) -> None:
        self._client.table(self._table).delete().eq("id", routine_id).execute()
        logger.info("ROUTINE delete id=%s", routine_id)
