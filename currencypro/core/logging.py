import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Per-request context copied onto every log record emitted while handling it
request_ctx: ContextVar[Optional[Dict[str, str]]] = ContextVar("request_ctx", default=None)

REQUEST_ID_HEADER = "X-Request-ID"
_CONTEXT_KEYS = ("request_id", "method", "path")


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        ctx = request_ctx.get() or {}
        for key in _CONTEXT_KEYS:
            setattr(record, key, ctx.get(key, "-"))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    `static` fields (service name, version) are stamped on every line; per-call
    fields are passed as `extra={"fields": {...}}`.
    """

    def __init__(self, static: Optional[Dict[str, Any]] = None):
        super().__init__()
        self._static = dict(static or {})

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: Dict[str, Any] = {
            "time": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self._static,
        }
        for key in _CONTEXT_KEYS:
            value = getattr(record, key, "-")
            if value != "-":
                line[key] = value
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            line.update(fields)
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def init_logging(debug: bool = False, service: str = "currencypro", version: str = "") -> None:
    level = logging.DEBUG if debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter({"service": service, "version": version}))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    # Requests are logged by request_context_middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


async def request_context_middleware(request, call_next):  # type: ignore
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = request_ctx.set(
        {"request_id": rid, "method": request.method, "path": request.url.path}
    )
    logger = logging.getLogger("currencypro.request")
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers[REQUEST_ID_HEADER] = rid
        return response
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.log(
            logging.WARNING if status_code >= 500 else logging.INFO,
            "request finished with %s in %sms",
            status_code,
            elapsed_ms,
            extra={"fields": {"status": status_code, "duration_ms": elapsed_ms}},
        )
        request_ctx.reset(token)
