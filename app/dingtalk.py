"""Signed delivery to a DingTalk group-robot webhook."""
import base64
import hashlib
import hmac
import json
import logging
import time
from typing import Optional
from urllib.parse import quote_plus

import httpx

from app.errors import DeliveryError
from app.models import SignedWebhookCall, TextContent, TextMessage

logger = logging.getLogger(__name__)


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def sign(secret: str, timestamp_ms: int) -> str:
    """
    Compute the DingTalk robot signature.

    HMAC-SHA256 of "<timestamp>\\n<secret>" keyed by the secret, Base64-encoded
    and then percent-encoded for use as a query parameter.
    """
    string_to_sign = f"{timestamp_ms}\n{secret}"
    digest = hmac.new(
        secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return quote_plus(base64.b64encode(digest).decode("ascii"))


def signed_url(webhook: str, timestamp_ms: int, signature: str) -> str:
    """Append timestamp and sign query params to the base webhook URL."""
    separator = "&" if "?" in webhook else "?"
    return f"{webhook}{separator}timestamp={timestamp_ms}&sign={signature}"


class SignedWebhookSender:
    """Posts text messages to a robot webhook that requires signed URLs."""

    def __init__(
        self,
        webhook: str,
        secret: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook = webhook
        self.secret = secret
        self.timeout = timeout
        self._transport = transport

    def prepare(self, text: str, timestamp_ms: Optional[int] = None) -> SignedWebhookCall:
        if timestamp_ms is None:
            timestamp_ms = current_timestamp_ms()
        return SignedWebhookCall(
            timestamp=timestamp_ms,
            signature=sign(self.secret, timestamp_ms),
            payload=TextMessage(text=TextContent(content=text)),
        )

    async def send(self, text: str, timestamp_ms: Optional[int] = None) -> SignedWebhookCall:
        """
        Deliver ``text`` and confirm the robot accepted it.

        Raises:
            DeliveryError: on HTTP failure, a non-JSON body or errcode != 0
        """
        call = self.prepare(text, timestamp_ms)
        url = signed_url(self.webhook, call.timestamp, call.signature)
        body = json.dumps(call.payload.model_dump(), ensure_ascii=False).encode("utf-8")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    url,
                    content=body,
                    headers={"Content-Type": "application/json; charset=utf-8"},
                )
            except httpx.TimeoutException as exc:
                raise DeliveryError(f"DingTalk timeout after {self.timeout}s") from exc
            except httpx.HTTPError as exc:
                # httpx errors carry the request URL; keep the token and sign out of it
                raise DeliveryError(f"DingTalk request failed: {type(exc).__name__}") from exc

        out = response.text
        if not response.is_success:
            raise DeliveryError(f"DingTalk HTTP {response.status_code}: {out}", body=out)

        try:
            result = json.loads(out)
        except ValueError:
            raise DeliveryError(out, body=out)
        if not isinstance(result, dict) or result.get("errcode") != 0:
            raise DeliveryError(out, body=out)

        logger.info("Message delivered to DingTalk")
        return call
