#!/usr/bin/env python3
"""
Upload the seed ingredient catalog (data/ingredient_catalog.json) to Supabase.
Existing names are skipped, so the script can be re-run safely.
Run from backend: python scripts/seed_catalog.py
"""
import logging
import sys
from pathlib import Path

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_catalog() -> int:
    from beautyscan.catalog.catalog_store import JsonFileCatalog, SupabaseIngredientCatalog
    from beautyscan.storage.supabase_client import get_supabase_client

    seed = JsonFileCatalog()
    if not len(seed):
        logger.error("Seed catalog is empty or missing.")
        return 1
    try:
        client = get_supabase_client()
    except RuntimeError as e:
        logger.error("Supabase credentials missing: %s", e)
        return 1

    target = SupabaseIngredientCatalog(client)
    records = seed.fetch_all()
    existing = {r.name.lower() for r in target.get_by_names([r.name for r in records])}
    inserted = 0
    for record in records:
        if record.name.lower() in existing:
            logger.info("Skipped %s (already exists)", record.name)
            continue
        target.create(record)
        inserted += 1
    logger.info("SEED catalog version=%s inserted=%d skipped=%d", seed.get_version(), inserted, len(records) - inserted)
    return 0


if __name__ == "__main__":
    sys.exit(seed_catalog())
