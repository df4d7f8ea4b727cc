"""Request id bookkeeping shared by the middleware and the log formatter."""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import re
from typing import Iterator, Optional
from uuid import uuid4

REQUEST_ID_HEADER = "X-Request-ID"

# Caller ids end up verbatim in log lines and response headers.
_ACCEPTABLE_ID = re.compile(r"[A-Za-z0-9._:-]{1,64}")

_current_id: ContextVar[Optional[str]] = ContextVar("duckfs_request_id", default=None)


def accept_request_id(candidate: Optional[str]) -> str:
    """Reuse ``candidate`` when it is a short, log-safe token; otherwise mint a fresh id."""
    if candidate and _ACCEPTABLE_ID.fullmatch(candidate):
        return candidate
    return uuid4().hex


def get_request_id() -> Optional[str]:
    return _current_id.get()


@contextmanager
def request_context(request_id: str) -> Iterator[str]:
    token = _current_id.set(request_id)
    try:
        yield request_id
    finally:
        _current_id.reset(token)
