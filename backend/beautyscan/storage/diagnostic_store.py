"""
Append-only diagnostics table: one row per questionnaire submission.
"""
import logging
from typing import Any, Dict, List, Optional

from beautyscan.models.diagnostic import DiagnosticType

logger = logging.getLogger(__name__)

DIAGNOSTICS_TABLE = "diagnostics"


class DiagnosticStore:
    def __init__(self, client: Any, table: str = DIAGNOSTICS_TABLE):
        self._client = client
        self._table = table

    def insert(
        self,
        user_id: str,
        diagnostic_type: DiagnosticType,
        answers: Dict[str, Any],
        result: Dict[str, Any],
    ) -> Dict[str, Any]:
        row = {
            "user_id": user_id,
            "type": diagnostic_type.value,
            "answers": answers,
            "result": result,
        }
        resp = self._client.table(self._table).insert(row).execute()
        logger.info("DIAGNOSTIC_SAVE user_id=%s type=%s", user_id, diagnostic_type.value)
        rows = resp.data or []
        return rows[0] if rows else row

    def latest_for_user(self, user_id: str, diagnostic_type: DiagnosticType) -> Optional[Dict[str, Any]]:
        resp = (
            self._client.table(self._table)
            .select("*")
            .eq("user_id", user_id)
            .eq("type", diagnostic_type.value)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        rows = resp.data or []
        return rows[0] if rows else None

    def list_all(self, diagnostic_type: Optional[DiagnosticType] = None, limit: int = 100) -> List[Dict[str, Any]]:
        """Admin view across users."""
        query = self._client.table(self._table).select("*")
        if diagnostic_type is not None:
            query = query.eq("type", diagnostic_type.value)
        resp = query.order("created_at", desc=True).limit(limit).execute()
        return resp.data or []
