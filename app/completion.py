"""Chat-completion API client."""
import logging
from typing import Any, Optional

import httpx

from app.errors import UpstreamError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant for a DingTalk group."
NO_CONTENT_PLACEHOLDER = "(no content)"


def extract_answer(data: Any) -> str:
    """Return the first choice's message text, or the placeholder if there is none."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return NO_CONTENT_PLACEHOLDER
    if not isinstance(content, str):
        return NO_CONTENT_PLACEHOLDER
    return content.strip() or NO_CONTENT_PLACEHOLDER


class CompletionClient:
    """Sends a single prompt to an OpenAI-compatible chat-completion endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        temperature: float = 0.6,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.url = base_url.rstrip("/") + "/chat/completions"
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }

    async def complete(self, prompt: str) -> str:
        """
        Ask the model and return its answer text.

        Raises:
            UpstreamError: on a non-2xx status, timeout or transport failure
        """
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.url, json=self.build_payload(prompt), headers=headers)
            except httpx.TimeoutException as exc:
                raise UpstreamError(f"OpenAI timeout after {self.timeout}s") from exc
            except httpx.HTTPError as exc:
                raise UpstreamError(f"OpenAI request failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Completion API returned an error",
                extra={"upstream_status": response.status_code},
            )
            raise UpstreamError(
                f"OpenAI HTTP {response.status_code}: {response.text}",
                upstream_status=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        return extract_answer(data)
