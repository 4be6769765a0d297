import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from marathon_adapter.redaction import redact_text


request_id_ctx = contextvars.ContextVar("marathon_request_id", default="")
_logger = logging.getLogger("marathon.obs")


def get_request_id() -> str:
    return request_id_ctx.get() or ""


@contextmanager
def request_context(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request id for every call and event issued inside the block."""
    value = request_id or str(uuid.uuid4())
    token = request_id_ctx.set(value)
    try:
        yield value
    finally:
        request_id_ctx.reset(token)


def log_event(event: str, **fields: Any) -> None:
    payload = {"event": event, "request_id": get_request_id(), "engine": "marathon"}
    for key, value in fields.items():
        if value is None:
            continue
        payload[key] = redact_text(value) if isinstance(value, str) else value
    line = " ".join(f"{key}={payload[key]}" for key in sorted(payload))
    if payload.get("outcome") == "FAILED":
        _logger.warning(line)
    else:
        _logger.info(line)
