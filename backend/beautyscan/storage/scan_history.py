"""
Per-user scan history and its summary statistics.
"""
import logging
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SCAN_HISTORY_TABLE = "scan_history"

# Postgres trims trailing zeros from fractions and may print offsets as "+00";
# datetime.fromisoformat before 3.11 wants exactly 6 fraction digits and "+HH:MM".
_FRACTION = re.compile(r"\.(\d+)")
_SHORT_OFFSET = re.compile(r"(:\d{2}(?:\.\d+)?[+-]\d{2})$")


@dataclass
class ScanStats:
    total_scans: int = 0
    unique_products: int = 0
    most_scanned_product: Optional[str] = None
    scans_this_week: int = 0

    def to_dict(self) -> dict:
        return {
            "total_scans": self.total_scans,
            "unique_products": self.unique_products,
            "most_scanned_product": self.most_scanned_product,
            "scans_this_week": self.scans_this_week,
        }


def _normalize_iso(value: str) -> str:
    text = value.strip().replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return _SHORT_OFFSET.sub(r"\1:00", text)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value:
        try:
            ts = datetime.fromisoformat(_normalize_iso(value))
        except ValueError:
            return None
    else:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def compute_scan_stats(items: List[Dict[str, Any]], now: Optional[datetime] = None) -> ScanStats:
    """
    items: history rows, newest first.
    unique_products counts distinct non-null product_id; the most scanned product
    is by product_name, ties going to the first one seen.
    """
    now = now or datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)

    product_ids = {item.get("product_id") for item in items if item.get("product_id")}
    this_week = 0
    for item in items:
        ts = _parse_timestamp(item.get("scanned_at"))
        if ts is not None and ts > week_ago:
            this_week += 1

    counts = Counter(item.get("product_name") for item in items if item.get("product_name"))
    most_scanned = None
    if counts:
        # Counter.most_common keeps insertion order among equal counts
        most_scanned = counts.most_common(1)[0][0]

    return ScanStats(
        total_scans=len(items),
        unique_products=len(product_ids),
        most_scanned_product=most_scanned,
        scans_this_week=this_week,
    )


class ScanHistoryStore:
    def __init__(self, client: Any, table: str = SCAN_HISTORY_TABLE):
        self._client = client
        self._table = table

    def record(
        self,
        user_id: str,
        product_name: str,
        overall_tier: Optional[int] = None,
        product_id: Optional[str] = None,
        product_brand: Optional[str] = None,
        barcode: Optional[str] = None,
    ) -> Dict[str, Any]:
        row = {
            "user_id": user_id,
            "product_id": product_id,
            "product_name": product_name,
            "product_brand": product_brand,
            "barcode": barcode,
            "overall_tier": overall_tier,
            "scanned_at": datetime.now(timezone.utc).isoformat(),
        }
        resp = self._client.table(self._table).insert(row).execute()
        logger.info("SCAN_HISTORY record user_id=%s product=%s", user_id, product_name[:60])
        rows = resp.data or []
        return rows[0] if rows else row

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        resp = (
            self._client.table(self._table)
            .select("*")
            .eq("user_id", user_id)
            .order("scanned_at", desc=True)
            .execute()
        )
        return resp.data or []

    def delete(self, user_id: str, item_id: str) -> None:
        self._client.table(self._table).delete().eq("id", item_id).eq("user_id", user_id).execute()
        logger.info("SCAN_HISTORY delete user_id=%s id=%s", user_id, item_id)
