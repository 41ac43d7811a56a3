"""Relay error taxonomy and JSON error bodies."""
from typing import Any, Dict, Iterable, List, Optional


class RelayError(Exception):
    """Base class for every failure the relay turns into a JSON response."""

    status_code = 500
    error = "server error"
    result = "error"

    def to_body(self, secrets: Iterable[str] = ()) -> Dict[str, Any]:
        return {"error": self.error, "detail": sanitize(str(self), secrets)}


class ValidationError(RelayError):
    """Missing or empty prompt (client fault)."""

    status_code = 400
    error = "prompt required. Use ?prompt=hello or POST {\"prompt\": \"...\"}"
    result = "invalid_prompt"

    def to_body(self, secrets: Iterable[str] = ()) -> Dict[str, Any]:
        return {"error": self.error}


class ConfigurationError(RelayError):
    """Required settings are missing (operator fault)."""

    error = "Missing env vars"
    result = "config_error"

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing env vars: {', '.join(self.missing)}")

    def to_body(self, secrets: Iterable[str] = ()) -> Dict[str, Any]:
        return {"error": self.error, "need": self.missing}


class UpstreamError(RelayError):
    """Chat-completion API failed or was unreachable."""

    result = "upstream_error"

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: str = ""):
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(message)


class DeliveryError(RelayError):
    """Webhook rejected the message or was unreachable."""

    result = "delivery_error"

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)


def sanitize(text: str, secrets: Iterable[str]) -> str:
    """Mask every configured secret value found in ``text``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, "***")
    return text
