"""
Unit tests for the Supabase-backed stores (client mocked) and scan statistics.
Run from backend: python -m pytest tests/test_storage.py -v
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest


def _client(rows=None):
    """MagicMock Supabase client whose query chains all end in execute() -> rows."""
    client = MagicMock()
    table = client.table.return_value
    for name in ("select", "insert", "update", "delete", "eq", "in_", "ilike", "or_", "contains", "order", "limit"):
        getattr(table, name).return_value = table
    table.execute.return_value = MagicMock(data=rows if rows is not None else [])
    return client, table


# --- Catalog ---

def test_supabase_catalog_fetch_all_keeps_table_order():
    from beautyscan.catalog.catalog_store import SupabaseIngredientCatalog
    from beautyscan.models.hazard import HazardTier
    client, table = _client([
        {"id": 1, "name": "aqua", "hazard_tier": 0},
        {"id": 2, "name": "parfum", "hazard_tier": "2"},
    ])
    records = SupabaseIngredientCatalog(client, table="ingredients").fetch_all()
    client.table.assert_called_with("ingredients")
    assert [r.name for r in records] == ["aqua", "parfum"]
    assert records[1].hazard_tier == HazardTier.MODERATE


def test_supabase_catalog_legacy_scheme():
    from beautyscan.catalog.catalog_store import SupabaseIngredientCatalog
    from beautyscan.models.hazard import HazardTier, TierScheme
    client, _ = _client([{"id": 1, "name": "parfum", "danger_level": 2}])
    records = SupabaseIngredientCatalog(client, table="t", scheme=TierScheme.LEGACY3).fetch_all()
    assert records[0].hazard_tier == HazardTier.HIGH


def test_supabase_catalog_update_filters_fields():
    from beautyscan.catalog.catalog_store import SupabaseIngredientCatalog
    from beautyscan.models.hazard import HazardTier
    client, table = _client([{"id": 5, "name": "bht", "hazard_tier": 3}])
    updated = SupabaseIngredientCatalog(client, table="t").update("5", {"hazard_tier": HazardTier.HIGH, "id": "99"})
    table.update.assert_called_once_with({"hazard_tier": 3})
    table.eq.assert_called_with("id", "5")
    assert updated.hazard_tier == HazardTier.HIGH


def test_supabase_catalog_search_blank_query_skips_request():
    from beautyscan.catalog.catalog_store import SupabaseIngredientCatalog
    client, table = _client()
    assert SupabaseIngredientCatalog(client, table="t").search("  ") == []
    table.execute.assert_not_called()


def test_file_catalog_is_read_only(tmp_path):
    from beautyscan.catalog.catalog_store import JsonFileCatalog, ReadOnlyCatalogError
    from beautyscan.models.ingredient import IngredientRecord
    path = tmp_path / "catalog.json"
    path.write_text('{"catalog_version": "2", "ingredients": [{"name": "Aqua", "hazard_tier": 0}]}', encoding="utf-8")
    catalog = JsonFileCatalog(path)
    assert len(catalog) == 1
    assert catalog.get_version() == "2"
    assert [r.name for r in catalog.search("aq")] == ["Aqua"]
    with pytest.raises(ReadOnlyCatalogError):
        catalog.create(IngredientRecord(name="x"))


def test_build_catalog_file_backend(monkeypatch):
    from beautyscan.catalog.catalog_store import JsonFileCatalog, build_catalog
    monkeypatch.setenv("CATALOG_BACKEND", "file")
    assert isinstance(build_catalog(), JsonFileCatalog)


def test_build_catalog_supabase_backend(monkeypatch):
    from beautyscan.catalog.catalog_store import SupabaseIngredientCatalog, build_catalog
    monkeypatch.setenv("CATALOG_BACKEND", "supabase")
    client, _ = _client()
    assert isinstance(build_catalog(lambda: client), SupabaseIngredientCatalog)


# --- Supabase client ---

def test_supabase_client_requires_credentials(monkeypatch):
    from beautyscan.storage import supabase_client
    supabase_client.reset_supabase_client()
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("VITE_SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    with pytest.raises(RuntimeError):
        supabase_client.get_supabase_client()


def test_supabase_client_is_created_once(monkeypatch):
    from beautyscan.storage import supabase_client
    supabase_client.reset_supabase_client()
    monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
    with patch("beautyscan.storage.supabase_client.create_client") as mock_create:
        first = supabase_client.get_supabase_client()
        second = supabase_client.get_supabase_client()
    assert first is second
    mock_create.assert_called_once_with("https://x.supabase.co", "service-key")
    supabase_client.reset_supabase_client()


# --- Products ---

def test_product_create_splits_ingredients():
    from beautyscan.storage.product_store import ProductStore
    client, table = _client([{"id": "p1"}])
    row = ProductStore(client).create(" Sérum ", "Aqua, Glycerin (veg), ", brand=" ", barcode="123")
    inserted = table.insert.call_args[0][0]
    assert inserted["name"] == "Sérum"
    assert inserted["brand"] is None
    assert inserted["ingredients"] == ["Aqua", "Glycerin (veg)"]
    assert inserted["category"] == "cosmetic"
    assert row == {"id": "p1"}


def test_product_search_escapes_or_filter():
    from beautyscan.storage.product_store import ProductStore
    client, table = _client([])
    ProductStore(client).search("crème, (bio)")
    expr = table.or_.call_args[0][0]
    assert expr.count(",") == 2
    assert "(" not in expr


def test_product_get_missing_returns_none():
    from beautyscan.storage.product_store import ProductStore
    client, _ = _client([])
    assert ProductStore(client).get("nope") is None


def test_product_list_all_newest_first():
    from beautyscan.storage.product_store import ProductStore
    client, table = _client([{"id": "p2"}, {"id": "p1"}])
    assert ProductStore(client).list_all(limit=5) == [{"id": "p2"}, {"id": "p1"}]
    table.order.assert_called_once_with("created_at", desc=True)
    table.limit.assert_called_once_with(5)


def test_product_update_splits_ingredients_and_blanks_to_null():
    from beautyscan.storage.product_store import ProductStore
    client, table = _client([{"id": "p1", "name": "Baume"}])
    row = ProductStore(client).update("p1", {"name": " Baume ", "brand": "  ", "ingredients_text": "Aqua, Cera Alba"})
    table.update.assert_called_once_with({"name": "Baume", "brand": None, "ingredients": ["Aqua", "Cera Alba"]})
    table.eq.assert_called_with("id", "p1")
    assert row == {"id": "p1", "name": "Baume"}


def test_product_update_nothing_to_change_skips_request():
    from beautyscan.storage.product_store import ProductStore
    client, table = _client([{"id": "p1"}])
    assert ProductStore(client).update("p1", {"id": "other"}) is None
    table.execute.assert_not_called()


def test_product_delete():
    from beautyscan.storage.product_store import ProductStore
    client, table = _client()
    ProductStore(client).delete("p9")
    table.delete.assert_called_once()
    table.eq.assert_called_once_with("id", "p9")


# --- Routines ---

def test_routine_list_ordered_by_type_then_position():
    from beautyscan.storage.routine_store import RoutineStore
    client, table = _client([{"id": "r1"}])
    assert RoutineStore(client).list_all() == [{"id": "r1"}]
    client.table.assert_called_with("routines")
    assert [c[0] for c in table.order.call_args_list] == [("routine_type",), ("order_index",)]
    table.eq.assert_not_called()


def test_routine_list_filters():
    from beautyscan.storage.routine_store import RoutineStore
    client, table = _client([])
    RoutineStore(client).list_all("matin", recommended_for="peau sèche")
    table.eq.assert_called_once_with("routine_type", "matin")
    table.contains.assert_called_once_with("recommended_for", ["peau sèche"])


def test_routine_create_defaults_order_and_drops_unknown_fields():
    from beautyscan.storage.routine_store import RoutineStore
    client, table = _client([{"id": "r1"}])
    row = RoutineStore(client).create({"title": "Nettoyer", "step": "1", "routine_type": "soir", "id": "x"})
    inserted = table.insert.call_args[0][0]
    assert inserted == {"title": "Nettoyer", "step": "1", "routine_type": "soir", "order_index": 0}
    assert row == {"id": "r1"}


def test_routine_update_and_delete():
    from beautyscan.storage.routine_store import RoutineStore
    client, table = _client([{"id": "r1", "order_index": 3}])
    store = RoutineStore(client)
    assert store.update("r1", {"order_index": 3}) == {"id": "r1", "order_index": 3}
    table.update.assert_called_once_with({"order_index": 3})
    store.delete("r1")
    table.delete.assert_called_once()
    assert [c[0] for c in table.eq.call_args_list] == [("id", "r1"), ("id", "r1")]


def test_routine_update_missing_row():
    from beautyscan.storage.routine_store import RoutineStore
    client, _ = _client([])
    assert RoutineStore(client).update("nope", {"title": "Hydrater"}) is None


# --- Scan history ---

def test_scan_stats():
    from beautyscan.storage.scan_history import compute_scan_stats
    now = datetime(2024, 6, 10, tzinfo=timezone.utc)
    items = [
        {"product_id": "a", "product_name": "Crème", "scanned_at": (now - timedelta(days=1)).isoformat()},
        {"product_id": "b", "product_name": "Sérum", "scanned_at": (now - timedelta(days=2)).isoformat()},
        {"product_id": None, "product_name": "Sérum", "scanned_at": "2024-06-01T00:00:00Z"},
        {"product_id": "a", "product_name": "Crème", "scanned_at": (now - timedelta(days=7)).isoformat()},
    ]
    stats = compute_scan_stats(items, now=now)
    assert stats.total_scans == 4
    assert stats.unique_products == 2
    # tie between Crème and Sérum: first seen (newest) wins
    assert stats.most_scanned_product == "Crème"
    # exactly 7 days old is not "this week"
    assert stats.scans_this_week == 2


def test_scan_stats_accepts_postgres_timestamps():
    from beautyscan.storage.scan_history import compute_scan_stats
    now = datetime(2024, 5, 2, tzinfo=timezone.utc)
    items = [
        {"product_name": "a", "scanned_at": "2024-05-01T12:34:56.78901+00:00"},
        {"product_name": "b", "scanned_at": "2024-05-01T08:00:00.5Z"},
        {"product_name": "c", "scanned_at": "2024-04-30 09:15:02.1234567+00"},
        {"product_name": "d", "scanned_at": "not a date"},
    ]
    assert compute_scan_stats(items, now=now).scans_this_week == 3


def test_scan_stats_empty():
    from beautyscan.storage.scan_history import compute_scan_stats
    stats = compute_scan_stats([])
    assert stats.to_dict() == {
        "total_scans": 0, "unique_products": 0, "most_scanned_product": None, "scans_this_week": 0,
    }


def test_history_delete_scoped_to_user():
    from beautyscan.storage.scan_history import ScanHistoryStore
    client, table = _client()
    ScanHistoryStore(client).delete("user-1", "item-9")
    table.delete.assert_called_once()
    assert [c[0] for c in table.eq.call_args_list] == [("id", "item-9"), ("user_id", "user-1")]


def test_history_list_newest_first():
    from beautyscan.storage.scan_history import ScanHistoryStore
    client, table = _client([{"id": 1}])
    assert ScanHistoryStore(client).list_for_user("u") == [{"id": 1}]
    table.order.assert_called_once_with("scanned_at", desc=True)


# --- Diagnostics ---

def test_diagnostic_store_insert_and_latest():
    from beautyscan.models.diagnostic import DiagnosticType
    from beautyscan.storage.diagnostic_store import DiagnosticStore
    client, table = _client([{"id": "d1", "type": "peau"}])
    store = DiagnosticStore(client)
    row = store.insert("u1", DiagnosticType.SKIN, {"q1": "A"}, {"profile_label": "sèche"})
    assert row["id"] == "d1"
    inserted = table.insert.call_args[0][0]
    assert inserted["type"] == "peau"
    assert inserted["answers"] == {"q1": "A"}
    assert store.latest_for_user("u1", DiagnosticType.SKIN) == {"id": "d1", "type": "peau"}


def test_diagnostic_store_latest_missing():
    from beautyscan.models.diagnostic import DiagnosticType
    from beautyscan.storage.diagnostic_store import DiagnosticStore
    client, _ = _client([])
    assert DiagnosticStore(client).latest_for_user("u1", DiagnosticType.HAIR) is None


# --- Auth ---

def test_extract_bearer_token():
    from beautyscan.storage.auth import extract_bearer_token
    assert extract_bearer_token("Bearer abc") == "abc"
    assert extract_bearer_token("bearer  abc ") == "abc"
    assert extract_bearer_token("Basic abc") is None
    assert extract_bearer_token(None) is None


def test_resolve_auth_context_admin():
    from beautyscan.storage.auth import resolve_auth_context
    client, table = _client([{"role": "admin"}])
    client.auth.get_user.return_value = MagicMock(user=MagicMock(id="u-1"))
    ctx = resolve_auth_context(client, "tok")
    assert ctx.user_id == "u-1"
    assert ctx.is_admin
    client.table.assert_called_with("user_roles")


def test_resolve_auth_context_rejected_token():
    from beautyscan.storage.auth import AuthenticationError, resolve_auth_context
    client, _ = _client()
    client.auth.get_user.side_effect = Exception("JWT expired")
    with pytest.raises(AuthenticationError):
        resolve_auth_context(client, "tok")
    with pytest.raises(AuthenticationError):
        resolve_auth_context(client, None)
