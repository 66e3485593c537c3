from __future__ import annotations  # LLM request gateway module

import logging
import os
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from pydantic import BaseModel

from config import LlmRoute
from config.settings import settings
from observability import log_event
from services.errors import BudgetExceeded, LimitExceeded, UpstreamError, ValidationError

from .budget import TokenBudget


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(UpstreamError):  # Base gateway error
    pass


class LlmReply(BaseModel):  # Normalized model reply
    text: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


def ensure_budget(budget: TokenBudget) -> None:  # Reject calls once the guard threshold is passed
    if budget.exhausted():
        log_event("budget_guard", "-", used=budget.used, ceiling=budget.ceiling)
        raise BudgetExceeded("API budget nearly reached. Please contact support.")


def ensure_check_available(checks_used: int, limit: Optional[int] = None) -> int:  # Enforce the coaching cap
    cap = settings.MAX_CODE_CHECKS if limit is None else limit
    if checks_used < 0:
        raise ValidationError("checksUsed must be non-negative")
    if checks_used >= cap:
        raise LimitExceeded(f"Maximum number of code checks ({cap}) reached")
    return cap - checks_used - 1


def invoke(
    system_prompt: str,
    user_message: str,
    max_tokens: int,
    temperature: float,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    budget: Optional[TokenBudget] = None,
) -> LlmReply:  # Send one prompt bundle to the configured route
    payload: Dict[str, Any] = {
        "model": cfg.model,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "system": system_prompt,
        "messages": [
            {"role": "user", "content": [{"type": "text", "text": user_message}]},
        ],
    }
    headers = {"Content-Type": "application/json"}
    if cfg.api_key_env:
        api_key = os.getenv(cfg.api_key_env)
        if api_key:
            headers[cfg.api_key_header] = api_key
    headers.update(cfg.extra_headers)
    preview = _preview(user_message)
    logger.info("LLM request send route=%s model=%s preview=%s", cfg.name, cfg.model, preview)
    try:
        response, close_cb = _post(f"{cfg.base_url}{cfg.endpoint}", payload, headers, cfg.timeout_s, client)
    except Exception as exc:  # noqa: BLE001
        logger.error("LLM transport failure: %s", exc)
        raise LlmGatewayError("LLM transport failed", details=str(exc)) from exc
    try:
        if response.status_code >= 400:
            detail = _error_message(response)
            logger.error("LLM error status: %s %s", response.status_code, detail)
            raise LlmGatewayError(f"LLM returned status {response.status_code}", details=detail)
        try:
            data = response.json()
        except Exception as exc:  # noqa: BLE001
            logger.error("Invalid JSON payload from LLM: %s", exc)
            raise LlmGatewayError("LLM payload was not JSON", details=str(exc)) from exc
    finally:
        _close_safely(close_cb)
    input_tokens, output_tokens = _extract_usage(data)
    if budget is not None:
        cumulative = budget.record(input_tokens + output_tokens)
    else:
        cumulative = None
    log_event(
        "llm_call",
        "-",
        route=cfg.name,
        model=cfg.model,
        tokens=input_tokens + output_tokens,
        cumulative=cumulative,
    )
    text = _extract_text(data)
    logger.info("LLM request done route=%s model=%s", cfg.name, cfg.model)
    return LlmReply(text=text, input_tokens=input_tokens, output_tokens=output_tokens)


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        return client.post(url, json=payload, headers=headers, timeout=timeout), None
    import httpx

    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _preview(text: str) -> str:  # Build preview string for logging
    stripped = text.strip()
    line = stripped.splitlines()[0] if stripped else ""
    if len(line) > 120:
        line = line[:117] + "..."
    return line


def _error_message(response: HttpResponse) -> str:  # Pull the upstream error message when present
    try:
        data = response.json()
    except Exception:  # noqa: BLE001
        return response.text
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return response.text


def _extract_usage(data: Any) -> Tuple[int, int]:  # Read token usage from the reply
    usage = data.get("usage") if isinstance(data, dict) else None
    if not isinstance(usage, dict):
        return 0, 0
    return int(usage.get("input_tokens") or 0), int(usage.get("output_tokens") or 0)


def _extract_text(data: Any) -> str:  # Take the first text-typed content block
    blocks = data.get("content") if isinstance(data, dict) else None
    if isinstance(blocks, list):
        for block in blocks:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text")
                if isinstance(text, str) and text.strip():
                    return text.strip()
                break
    raise LlmGatewayError("LLM response missing text content")
