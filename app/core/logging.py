"""JSON line logging with per-request correlation.

Every record carries ``severity`` and the current request id; access lines
also carry method, path, status_code and duration_ms.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

REQUEST_ID_HEADER = "X-Request-Id"

_ACCESS_FIELDS = ("method", "path", "status_code", "duration_ms")

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

access_logger = logging.getLogger("app.access")


def current_request_id() -> str:
    return _request_id.get() or "-"


def bind_request_id(rid: str):
    """Set the request id for the current context; returns a reset token."""
    return _request_id.set(rid)


def unbind_request_id(token) -> None:  # type: ignore[no-untyped-def]
    _request_id.reset(token)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": current_request_id(),
        }
        for key in _ACCESS_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def init_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    # httpx logs every request at INFO; rate lookups are already logged here
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def request_context_middleware(request, call_next):  # type: ignore
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = bind_request_id(rid)
    started = time.perf_counter()
    fields = {"method": request.method, "path": request.url.path}
    try:
        response = await call_next(request)
    except Exception:
        fields.update(status_code=500, duration_ms=_elapsed_ms(started))
        access_logger.exception("request failed", extra=fields)
        raise
    else:
        response.headers[REQUEST_ID_HEADER] = rid
        fields.update(status_code=response.status_code, duration_ms=_elapsed_ms(started))
        access_logger.info("request complete", extra=fields)
        return response
    finally:
        unbind_request_id(token)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
