"""Simple span helper for recording operation timings."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from .logger import log_event


@contextmanager
def span(name: str, subject: str = "-", **fields: Any) -> Iterator[None]:
    start = time.time()
    status = "error"
    try:
        yield
        status = "ok"
    finally:
        elapsed_ms = int((time.time() - start) * 1000)
        log_event("span", subject, name=name, ms=elapsed_ms, status=status, **fields)


__all__ = ["span"]
