import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import llm_gateway.llm_gateway as gateway_mod
from config.settings import settings
from llm_gateway import default_budget
from storage.migrate import migrate


class FakeResponse:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    @property
    def text(self) -> str:
        return json.dumps(self._payload) if not isinstance(self._payload, Exception) else ""


def anthropic_reply(text: Optional[str], input_tokens: int = 40, output_tokens: int = 20) -> Dict[str, Any]:
    content: List[Dict[str, Any]] = []
    if text is not None:
        content.append({"type": "text", "text": text})
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": content,
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }


class FakeTransport:
    """Stands in for the HTTP call made by the gateway."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.replies: List[FakeResponse] = []
        self.default = FakeResponse(200, anthropic_reply("What trade-offs did you weigh?"))

    reply = staticmethod(anthropic_reply)

    def queue(self, status_code: int, payload: Any) -> None:
        self.replies.append(FakeResponse(status_code, payload))

    def __call__(self, url, payload, headers, timeout, client):
        self.calls.append({"url": url, "payload": payload, "headers": headers, "timeout": timeout})
        response = self.replies.pop(0) if self.replies else self.default
        return response, None


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "CONFIG_PATH", str(ROOT / "app_config.json"), raising=False)
    migrate(db_path)
    default_budget.reset()
    try:
        yield db_path
    finally:
        default_budget.reset()
        td.cleanup()


@pytest.fixture
def fake_llm(monkeypatch) -> FakeTransport:
    transport = FakeTransport()
    monkeypatch.setattr(gateway_mod, "_post", transport)
    return transport
