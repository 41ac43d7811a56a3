"""Structured JSON logging utilities."""
import json
import time
import uuid
from datetime import datetime, timezone
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import logging

# Configure root logger to output JSON
logger = logging.getLogger()
handler = logging.StreamHandler()

# Optional record attributes copied into the JSON line when present
EXTRA_FIELDS = (
    "request_id",
    "method",
    "path",
    "status",
    "latency_ms",
    "state",
    "result",
    "upstream_status",
    "prompt_chars",
)


def configure_logging(level: str = "INFO"):
    """Configure logging level."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)
    handler.setLevel(log_level)
    # httpx logs full request URLs, which carry the robot access_token and sign
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


configure_logging()


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)
        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


handler.setFormatter(JSONFormatter())
logger.addHandler(handler)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log requests in JSON format."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        start_time = time.time()

        request.state.request_id = request_id

        response = await call_next(request)

        latency_ms = int((time.time() - start_time) * 1000)

        from app.routes.metrics import http_requests_total, request_latency_ms
        http_requests_total.labels(
            path=request.url.path,
            status=response.status_code,
        ).inc()
        request_latency_ms.observe(latency_ms)

        # Query strings are left out: GET prompts travel there
        logging.getLogger("http").info(
            "",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "latency_ms": latency_ms,
            },
        )
        response.headers["X-Request-ID"] = request_id

        return response
