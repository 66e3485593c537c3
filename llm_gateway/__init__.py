from __future__ import annotations  # Re-export llm_gateway public API

from .budget import TokenBudget, default_budget
from .llm_gateway import (
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    LlmReply,
    ensure_budget,
    ensure_check_available,
    invoke,
)

__all__ = [
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "LlmReply",
    "TokenBudget",
    "default_budget",
    "ensure_budget",
    "ensure_check_available",
    "invoke",
]
