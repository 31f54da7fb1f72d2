"""
External connectors: Open Food Facts (barcode lookup) and the chat-completion gateway.
"""
from .base import BarcodeProduct
from .open_food_facts import lookup_barcode
from .llm_gateway import (
    ChatCompletionClient,
    GatewayError,
    GatewayPaymentRequiredError,
    GatewayRateLimitError,
    GatewayUnavailableError,
)

__all__ = [
    "BarcodeProduct",
    "lookup_barcode",
    "ChatCompletionClient",
    "GatewayError",
    "GatewayPaymentRequiredError",
    "GatewayRateLimitError",
    "GatewayUnavailableError",
]
