#!/usr/bin/env python3
"""
Check if the external services (Open Food Facts, AI gateway) are reachable.
Run from backend: python scripts/check_external_apis.py
Exit 0 if every check passes; 1 otherwise.
"""
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Short timeout for health check
HEALTH_TIMEOUT = 8

# Nutella 400g; a barcode that has been on Open Food Facts for years
SAMPLE_BARCODE = "3017620422003"


def check_open_food_facts() -> Tuple[bool, str]:
    """Return (success, message)."""
    from beautyscan.external_apis.open_food_facts import lookup_barcode
    product = lookup_barcode(SAMPLE_BARCODE, timeout=HEALTH_TIMEOUT)
    if product is not None:
        return True, f"ok ({product.product_name or 'unnamed'})"
    return False, "no result"


def check_gateway() -> Tuple[bool, str]:
    """Return (success, message)."""
    from beautyscan.config import get_gateway_api_key
    from beautyscan.external_apis.llm_gateway import ChatCompletionClient, GatewayError
    if not get_gateway_api_key():
        return False, "no API key (set AI_GATEWAY_API_KEY)"
    client = ChatCompletionClient(timeout=HEALTH_TIMEOUT)
    try:
        content = client.complete("Réponds uniquement avec du JSON valide.", '{"ping": true}')
    except GatewayError as e:
        return False, f"{type(e).__name__}: {e}"
    return True, f"ok (model={client.model}, chars={len(content)})"


def main() -> int:
    print("Checking external services...")
    off_ok, off_msg = check_open_food_facts()
    print(f"  Open Food Facts: {'OK' if off_ok else 'FAIL'} - {off_msg}")
    gw_ok, gw_msg = check_gateway()
    print(f"  AI gateway:      {'OK' if gw_ok else 'FAIL'} - {gw_msg}")
    if off_ok and gw_ok:
        print("All services are working.")
        return 0
    print("At least one service failed.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
