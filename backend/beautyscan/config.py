"""
Paths, backend selection, and centralized configuration.
All resolution relative to the backend directory.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Repo root: backend/beautyscan/config.py -> parent=beautyscan, parent.parent=backend, parent.parent.parent=repo
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_REPO_ROOT = _BACKEND_DIR.parent

# --- Data paths ---
def get_seed_catalog_path() -> Path:
    return _REPO_ROOT / "data" / "ingredient_catalog.json"

# --- Supabase ---
def get_supabase_url() -> str:
    return (os.environ.get("SUPABASE_URL") or os.environ.get("VITE_SUPABASE_URL") or "").strip()

def get_supabase_key() -> str:
    return os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "").strip()

def get_catalog_backend() -> str:
    """'supabase' (default) or 'file' (reads the seed catalog JSON)."""
    value = os.environ.get("CATALOG_BACKEND", "supabase").strip().lower()
    return value if value in ("supabase", "file") else "supabase"

def get_catalog_table() -> str:
    return os.environ.get("CATALOG_TABLE", "ingredient_catalog").strip() or "ingredient_catalog"

# --- External APIs (lazy read from env) ---
OPEN_FOOD_FACTS_PRODUCT_URL = "https://world.openfoodfacts.org/api/v0/product/{barcode}.json"

def get_open_food_facts_timeout() -> int:
    return int(os.environ.get("OPEN_FOOD_FACTS_TIMEOUT", "10"))

def get_open_food_facts_max_retries() -> int:
    # Barcode lookups are not retried unless explicitly configured.
    return max(1, int(os.environ.get("OPEN_FOOD_FACTS_MAX_RETRIES", "1")))

# --- AI gateway (OpenAI-compatible chat completions) ---
def get_gateway_url() -> str:
    return os.environ.get("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1").strip().rstrip("/")

def get_gateway_api_key() -> str:
    return (os.environ.get("AI_GATEWAY_API_KEY") or os.environ.get("LOVABLE_API_KEY") or "").strip()

def get_gateway_model() -> str:
    return os.environ.get("AI_GATEWAY_MODEL", "google/gemini-2.5-flash").strip()

# Gateway timeout default (seconds)
AI_GATEWAY_TIMEOUT = int(os.environ.get("AI_GATEWAY_TIMEOUT", "60"))

# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: supabase_url=%s supabase_key=%s catalog_backend=%s catalog_table=%s "
        "seed_catalog=%s gateway_url=%s gateway_key=%s gateway_model=%s gateway_timeout=%ds",
        bool(get_supabase_url()), bool(get_supabase_key()),
        get_catalog_backend(), get_catalog_table(),
        get_seed_catalog_path().exists(),
        get_gateway_url(), bool(get_gateway_api_key()), get_gateway_model(),
        AI_GATEWAY_TIMEOUT,
    )
