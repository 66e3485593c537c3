import threading

import pytest

from config import LlmRoute
from llm_gateway import (
    LlmGatewayError,
    TokenBudget,
    ensure_budget,
    ensure_check_available,
    invoke,
)
from services.errors import BudgetExceeded, LimitExceeded, UpstreamError, ValidationError


def _route() -> LlmRoute:
    return LlmRoute(
        name="test",
        base_url="http://example.com",
        endpoint="/v1/messages",
        model="test-model",
        timeout_s=1.0,
        api_key_env="TEST_LLM_KEY",
        extra_headers={"anthropic-version": "2023-06-01"},
    )


class _Response:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    @property
    def text(self):
        return "raw body"


class _Client:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, *, json, headers, timeout):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _reply(content, input_tokens=12, output_tokens=8):
    return {"content": content, "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens}}


def test_invoke_builds_messages_payload(monkeypatch) -> None:
    monkeypatch.setenv("TEST_LLM_KEY", "secret")
    client = _Client(_Response(200, _reply([{"type": "text", "text": "Hello there"}])))
    reply = invoke("system text", "user text", 100, 0.8, cfg=_route(), client=client)

    assert reply.text == "Hello there"
    assert reply.input_tokens == 12
    assert reply.output_tokens == 8
    assert reply.total_tokens == 20
    request = client.requests[0]
    assert request["url"] == "http://example.com/v1/messages"
    assert request["json"]["model"] == "test-model"
    assert request["json"]["max_tokens"] == 100
    assert request["json"]["temperature"] == 0.8
    assert request["json"]["system"] == "system text"
    assert request["json"]["messages"] == [
        {"role": "user", "content": [{"type": "text", "text": "user text"}]}
    ]
    assert request["headers"]["x-api-key"] == "secret"
    assert request["headers"]["anthropic-version"] == "2023-06-01"


def test_invoke_takes_first_text_block() -> None:
    content = [
        {"type": "tool_use", "id": "t1", "name": "noop", "input": {}},
        {"type": "text", "text": "first"},
        {"type": "text", "text": "second"},
    ]
    client = _Client(_Response(200, _reply(content)))
    reply = invoke("s", "u", 50, 0.5, cfg=_route(), client=client)
    assert reply.text == "first"


def test_invoke_without_text_block_is_upstream_error() -> None:
    budget = TokenBudget(1000)
    client = _Client(_Response(200, _reply([{"type": "tool_use", "id": "t1", "name": "noop", "input": {}}])))
    with pytest.raises(UpstreamError):
        invoke("s", "u", 50, 0.5, cfg=_route(), client=client, budget=budget)
    # tokens were still spent upstream
    assert budget.used == 20


def test_invoke_records_usage_on_budget() -> None:
    budget = TokenBudget(1000)
    client = _Client(_Response(200, _reply([{"type": "text", "text": "ok"}], 30, 5)))
    invoke("s", "u", 50, 0.5, cfg=_route(), client=client, budget=budget)
    invoke("s", "u", 50, 0.5, cfg=_route(), client=client, budget=budget)
    assert budget.used == 70


def test_invoke_error_status_carries_upstream_message() -> None:
    payload = {"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}}
    client = _Client(_Response(401, payload))
    with pytest.raises(LlmGatewayError) as excinfo:
        invoke("s", "u", 50, 0.5, cfg=_route(), client=client)
    assert "401" in excinfo.value.message
    assert excinfo.value.details == "invalid x-api-key"
    assert excinfo.value.status_code == 500


def test_invoke_transport_failure_is_wrapped() -> None:
    client = _Client(error=ConnectionError("connection refused"))
    with pytest.raises(LlmGatewayError) as excinfo:
        invoke("s", "u", 50, 0.5, cfg=_route(), client=client)
    assert excinfo.value.details == "connection refused"


def test_invoke_non_json_payload() -> None:
    client = _Client(_Response(200, ValueError("not json")))
    with pytest.raises(LlmGatewayError):
        invoke("s", "u", 50, 0.5, cfg=_route(), client=client)


def test_ensure_budget_trips_above_ninety_percent() -> None:
    budget = TokenBudget(20000, 0.9)
    budget.record(18000)
    ensure_budget(budget)
    budget.record(1)
    with pytest.raises(BudgetExceeded) as excinfo:
        ensure_budget(budget)
    assert excinfo.value.status_code == 429


def test_budget_increments_are_atomic() -> None:
    budget = TokenBudget(10**9)

    def _work():
        for _ in range(1000):
            budget.record(1)

    threads = [threading.Thread(target=_work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert budget.used == 8000
    budget.reset()
    assert budget.used == 0


def test_budget_rejects_negative_tokens() -> None:
    with pytest.raises(ValueError):
        TokenBudget(100).record(-1)


def test_ensure_check_available_limits() -> None:
    assert ensure_check_available(0, 3) == 2
    assert ensure_check_available(2, 3) == 0
    with pytest.raises(LimitExceeded):
        ensure_check_available(3, 3)
    with pytest.raises(LimitExceeded):
        ensure_check_available(7, 3)
    with pytest.raises(ValidationError):
        ensure_check_available(-1, 3)
