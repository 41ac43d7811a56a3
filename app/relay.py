"""Prompt → completion → signed webhook relay."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import httpx

from app.completion import CompletionClient
from app.config import Settings
from app.dingtalk import SignedWebhookSender
from app.errors import ConfigurationError, RelayError
from app.models import AskResponse
from app.prompt import extract_prompt

logger = logging.getLogger(__name__)


class RelayState(str, Enum):
    IDLE = "idle"
    PROMPT_EXTRACTED = "prompt_extracted"
    ANSWER_OBTAINED = "answer_obtained"
    DELIVERED = "delivered"
    ERRORED = "errored"


# Forward-only transitions; ERRORED is reachable from every non-terminal state
_NEXT = {
    RelayState.IDLE: RelayState.PROMPT_EXTRACTED,
    RelayState.PROMPT_EXTRACTED: RelayState.ANSWER_OBTAINED,
    RelayState.ANSWER_OBTAINED: RelayState.DELIVERED,
}


@dataclass
class RelayOutcome:
    state: RelayState
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)
    result: str = "delivered"


class RelayHandler:
    """
    Runs one relay request through its three steps.

    A handler holds only immutable configuration, so a single instance can
    serve concurrent requests. Every RelayError is converted into a JSON
    outcome here; nothing escapes as an unhandled exception.
    """

    def __init__(
        self,
        settings: Settings,
        completion_transport: Optional[httpx.AsyncBaseTransport] = None,
        webhook_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._completion_transport = completion_transport
        self._webhook_transport = webhook_transport

    def completion_client(self) -> CompletionClient:
        s = self.settings
        return CompletionClient(
            api_key=s.openai_api_key,
            base_url=s.openai_base_url,
            model=s.openai_model,
            temperature=s.openai_temperature,
            timeout=s.openai_timeout,
            transport=self._completion_transport,
        )

    def webhook_sender(self) -> SignedWebhookSender:
        s = self.settings
        return SignedWebhookSender(
            webhook=s.dingtalk_webhook,
            secret=s.dingtalk_secret,
            timeout=s.dingtalk_timeout,
            transport=self._webhook_transport,
        )

    async def handle(
        self,
        method: str,
        query: Mapping[str, str],
        body: Optional[bytes] = None,
    ) -> RelayOutcome:
        state = RelayState.IDLE
        try:
            prompt = extract_prompt(method, query, body)
            state = _NEXT[state]
            logger.info("Prompt extracted", extra={"prompt_chars": len(prompt)})

            missing = self.settings.missing_required()
            if missing:
                raise ConfigurationError(missing)

            answer = await self.completion_client().complete(prompt)
            state = _NEXT[state]

            await self.webhook_sender().send(answer)
            state = _NEXT[state]
        except RelayError as exc:
            logger.error(
                f"Relay failed: {type(exc).__name__}",
                extra={"state": state.value, "result": exc.result},
            )
            return RelayOutcome(
                state=RelayState.ERRORED,
                status_code=exc.status_code,
                body=exc.to_body(self.settings.secret_values()),
                result=exc.result,
            )
        except Exception as exc:
            logger.exception("Unexpected relay error", extra={"state": state.value, "result": "error"})
            return RelayOutcome(
                state=RelayState.ERRORED,
                status_code=500,
                body=RelayError(str(exc)).to_body(self.settings.secret_values()),
                result="error",
            )

        logger.info("Relay complete", extra={"state": state.value, "result": "delivered"})
        return RelayOutcome(
            state=state,
            status_code=200,
            body=AskResponse(answer=answer).model_dump(),
        )
