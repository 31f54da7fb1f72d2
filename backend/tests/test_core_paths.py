"""
Unit tests for path resolution and env-driven configuration. Run from backend directory:
  cd backend && python -m pytest tests/test_core_paths.py -v
"""
import pytest


def test_backend_is_current_or_on_path():
    """Ensure tests run with backend as cwd or on path so 'beautyscan' resolves."""
    try:
        from beautyscan import config
    except ImportError:
        pytest.skip("Run tests from backend directory: cd backend && python -m pytest ...")
        return
    assert config._BACKEND_DIR.is_dir()
    assert (config._BACKEND_DIR / "beautyscan").is_dir()
    assert config._REPO_ROOT.is_dir()
    assert config._REPO_ROOT.name != "beautyscan"


def test_seed_catalog_path_resolution():
    """Seed catalog path is repo_root/data/ingredient_catalog.json."""
    from beautyscan.config import get_seed_catalog_path, _REPO_ROOT
    path = get_seed_catalog_path()
    assert path == _REPO_ROOT / "data" / "ingredient_catalog.json"
    assert path.suffix == ".json"


def test_seed_catalog_exists_when_data_present():
    from beautyscan.config import get_seed_catalog_path, _REPO_ROOT
    if not (_REPO_ROOT / "data").exists():
        pytest.skip("data/ directory not found")
    assert get_seed_catalog_path().exists()


def test_catalog_backend_defaults_to_supabase(monkeypatch):
    from beautyscan.config import get_catalog_backend
    monkeypatch.delenv("CATALOG_BACKEND", raising=False)
    assert get_catalog_backend() == "supabase"
    monkeypatch.setenv("CATALOG_BACKEND", "FILE")
    assert get_catalog_backend() == "file"
    monkeypatch.setenv("CATALOG_BACKEND", "mongo")
    assert get_catalog_backend() == "supabase"


def test_gateway_key_falls_back_to_lovable_key(monkeypatch):
    from beautyscan.config import get_gateway_api_key
    monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)
    monkeypatch.setenv("LOVABLE_API_KEY", "lov-key")
    assert get_gateway_api_key() == "lov-key"
    monkeypatch.setenv("AI_GATEWAY_API_KEY", "gw-key")
    assert get_gateway_api_key() == "gw-key"


def test_gateway_url_strips_trailing_slash(monkeypatch):
    from beautyscan.config import get_gateway_url
    monkeypatch.setenv("AI_GATEWAY_URL", "https://gw.example.com/v1/")
    assert get_gateway_url() == "https://gw.example.com/v1"


def test_open_food_facts_retries_at_least_one(monkeypatch):
    from beautyscan.config import get_open_food_facts_max_retries
    monkeypatch.delenv("OPEN_FOOD_FACTS_MAX_RETRIES", raising=False)
    assert get_open_food_facts_max_retries() == 1
    monkeypatch.setenv("OPEN_FOOD_FACTS_MAX_RETRIES", "0")
    assert get_open_food_facts_max_retries() == 1
    monkeypatch.setenv("OPEN_FOOD_FACTS_MAX_RETRIES", "3")
    assert get_open_food_facts_max_retries() == 3
