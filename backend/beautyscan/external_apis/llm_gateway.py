"""
OpenAI-compatible chat-completion gateway client.

One request per call, no retry. 429 and 402 map to dedicated errors so the API
can surface throttling and quota separately; anything else is "unavailable".
"""
import logging
from typing import List, Optional

import requests

from beautyscan.config import AI_GATEWAY_TIMEOUT, get_gateway_api_key, get_gateway_model, get_gateway_url

logger = logging.getLogger(__name__)


class GatewayError(RuntimeError):
    status_code = 503
    user_message = "Service d'analyse indisponible, veuillez réessayer plus tard."

    def __init__(self, message: str, upstream_status: Optional[int] = None, raw: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.raw = raw


class GatewayRateLimitError(GatewayError):
    status_code = 429
    user_message = "Limite de requêtes dépassée, veuillez réessayer plus tard."


class GatewayPaymentRequiredError(GatewayError):
    status_code = 402
    user_message = "Paiement requis, veuillez ajouter des crédits à votre compte Lovable AI."


class GatewayUnavailableError(GatewayError):
    pass


def _error_detail(resp: requests.Response) -> str:
    """Read {"error": {"message": ...}} or {"message": ...}; fall back to raw text."""
    raw = resp.text or ""
    try:
        data = resp.json()
    except ValueError:
        return raw[:300]
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])[:300]
        if isinstance(err, str):
            return err[:300]
        if data.get("message"):
            return str(data["message"])[:300]
    return raw[:300]


def _raise_for_status(resp: requests.Response) -> None:
    if resp.ok:
        return
    detail = _error_detail(resp)
    logger.error("AI_GATEWAY error status=%s detail=%s", resp.status_code, detail)
    if resp.status_code == 429:
        raise GatewayRateLimitError(detail, upstream_status=429, raw=resp.text)
    if resp.status_code == 402:
        raise GatewayPaymentRequiredError(detail, upstream_status=402, raw=resp.text)
    raise GatewayUnavailableError(f"AI gateway error: {resp.status_code}", upstream_status=resp.status_code, raw=resp.text)


class ChatCompletionClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: int = AI_GATEWAY_TIMEOUT,
    ):
        self.api_key = api_key if api_key is not None else get_gateway_api_key()
        self.base_url = (base_url or get_gateway_url()).rstrip("/")
        self.model = model or get_gateway_model()
        self.timeout = timeout

    def complete(self, system: str, user: str, temperature: Optional[float] = None) -> str:
        """
        Send one system + user exchange and return choices[0].message.content.
        Raises GatewayError subclasses on HTTP or network failure.
        """
        if not self.api_key:
            logger.error("AI_GATEWAY missing api key model=%s", self.model)
            raise GatewayUnavailableError("AI gateway API key is not configured")

        messages: List[dict] = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        payload: dict = {"model": self.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            resp = requests.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("AI_GATEWAY request failed: %s", e)
            raise GatewayUnavailableError(f"{type(e).__name__}: {e}") from e

        _raise_for_status(resp)

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning("AI_GATEWAY unexpected envelope: %s", (resp.text or "")[:200])
            raise GatewayUnavailableError("AI gateway returned an unexpected response") from e

        logger.info("AI_GATEWAY completion model=%s chars=%d", self.model, len(content or ""))
        return content or ""
