"""
HTTP GET with optional retries and exponential backoff for external APIs.
"""
import logging
import time
from typing import Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 1
DEFAULT_INITIAL_BACKOFF = 1.0


def get_with_retries(
    url: str,
    params: Optional[dict] = None,
    timeout: int = 10,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
) -> Tuple[Optional[requests.Response], Optional[str]]:
    """
    GET with up to `max_retries` attempts on timeout/connection errors.
    Returns (response, None) on success, (None, error_message) on failure.
    HTTP error statuses are returned as responses, not retried.
    """
    last_error: Optional[str] = None
    attempts = max(1, max_retries)
    for attempt in range(attempts):
        try:
            resp = requests.get(url, params=params or {}, timeout=timeout)
            return (resp, None)
        except requests.Timeout as e:
            last_error = f"Read timed out: {e}"
        except requests.RequestException as e:
            last_error = f"{type(e).__name__}: {e}"
        logger.warning(
            "EXTERNAL_API attempt=%s/%s url=%s error=%s",
            attempt + 1, attempts, url[:80], last_error,
        )
        if attempt < attempts - 1:
            delay = initial_backoff * (2 ** attempt)
            logger.info("EXTERNAL_API backoff %.1fs before retry", delay)
            time.sleep(delay)
    return (None, last_error)
