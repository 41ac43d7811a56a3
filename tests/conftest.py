"""Pytest configuration and fixtures."""
import json
import pytest
import httpx
from app.config import Settings, settings

API_KEY = "sk-test-key"
WEBHOOK = "https://oapi.dingtalk.com/robot/send?access_token=tok123"
SECRET = "SECtestsecret"


class Recorder:
    """httpx.MockTransport handler that records requests and replays canned responses."""

    def __init__(self, status_code=200, json_body=None, text=None, exc=None):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def called(self) -> bool:
        return bool(self.requests)

    def last_json(self):
        return json.loads(self.requests[-1].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def completion_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def relay_settings():
    """Fully configured settings, independent of the process environment."""
    return Settings(
        _env_file=None,
        openai_api_key=API_KEY,
        dingtalk_webhook=WEBHOOK,
        dingtalk_secret=SECRET,
    )


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Point the global settings at test values."""
    monkeypatch.setenv("OPENAI_API_KEY", API_KEY)
    monkeypatch.setenv("DINGTALK_WEBHOOK", WEBHOOK)
    monkeypatch.setenv("DINGTALK_SECRET", SECRET)
    monkeypatch.setattr(settings, "openai_api_key", API_KEY)
    monkeypatch.setattr(settings, "dingtalk_webhook", WEBHOOK)
    monkeypatch.setattr(settings, "dingtalk_secret", SECRET)
    yield
