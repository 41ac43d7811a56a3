"""Request and response models for the relay."""
from typing import Literal
from pydantic import BaseModel, Field

MAX_PROMPT_CHARS = 4000


class PromptRequest(BaseModel):
    """Prompt after trimming and truncation."""
    prompt: str = Field(..., min_length=1, max_length=MAX_PROMPT_CHARS)


class TextContent(BaseModel):
    content: str


class TextMessage(BaseModel):
    """DingTalk robot text message body."""
    msgtype: Literal["text"] = "text"
    text: TextContent


class SignedWebhookCall(BaseModel):
    """One signed delivery to the robot webhook."""
    timestamp: int
    signature: str
    payload: TextMessage


class AskResponse(BaseModel):
    ok: bool = True
    answer: str
