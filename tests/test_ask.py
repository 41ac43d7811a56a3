"""Tests for the /api/ask endpoint."""
import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.relay import RelayHandler
from app.routes.ask import get_relay_handler
from conftest import Recorder, completion_reply


@pytest.fixture
def completion():
    return Recorder(json_body=completion_reply(" Hi there! "))


@pytest.fixture
def webhook():
    return Recorder(json_body={"errcode": 0, "errmsg": "ok"})


@pytest.fixture
def client(relay_settings, completion, webhook):
    handler = RelayHandler(
        relay_settings,
        completion_transport=completion.transport(),
        webhook_transport=webhook.transport(),
    )
    app.dependency_overrides[get_relay_handler] = lambda: handler
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_ask_get_end_to_end(client, completion, webhook):
    response = client.get("/api/ask", params={"prompt": "hello"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    assert response.json() == {"ok": True, "answer": "Hi there!"}
    assert completion.last_json()["messages"][1] == {"role": "user", "content": "hello"}
    assert webhook.last_json() == {"msgtype": "text", "text": {"content": "Hi there!"}}


def test_ask_post_json(client, webhook):
    response = client.post("/api/ask", json={"prompt": "  hello  "})

    assert response.status_code == 200
    assert response.json()["answer"] == "Hi there!"
    assert webhook.called


def test_ask_put_is_treated_like_post(client):
    response = client.put("/api/ask", json={"prompt": "hello"})
    assert response.status_code == 200


def test_ask_missing_prompt_returns_400(client, completion, webhook):
    response = client.get("/api/ask")

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    assert "error" in response.json()
    assert not completion.called
    assert not webhook.called


def test_ask_invalid_json_returns_400(client, completion):
    response = client.post(
        "/api/ask",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert not completion.called


def test_ask_upstream_failure(client, completion, webhook):
    completion.status_code = 500
    completion.json_body = {"error": {"message": "overloaded"}}

    response = client.post("/api/ask", json={"prompt": "hello"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "server error"
    assert "500" in body["detail"]
    assert not webhook.called


def test_ask_webhook_rejection(client, webhook):
    webhook.json_body = {"errcode": 1, "errmsg": "bad token"}

    response = client.post("/api/ask", json={"prompt": "hello"})

    assert response.status_code == 500
    assert "bad token" in response.json()["detail"]


def test_ask_missing_config_uses_global_settings(monkeypatch):
    from app.config import settings
    monkeypatch.setattr(settings, "openai_api_key", None)

    response = TestClient(app).get("/api/ask", params={"prompt": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Missing env vars", "need": ["OPENAI_API_KEY"]}


def test_response_carries_request_id(client):
    response = client.get("/api/ask", params={"prompt": "hello"})
    assert response.headers["X-Request-ID"]


def test_ask_options_is_handled_as_body_method(client, completion):
    response = client.options("/api/ask")

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    assert "error" in response.json()
    assert not completion.called


def test_ask_head_is_not_rejected(client):
    response = client.head("/api/ask")
    assert response.status_code == 400


def test_ask_repeated_prompt_uses_first(client, completion):
    response = client.get("/api/ask?prompt=first&prompt=second")

    assert response.status_code == 200
    assert completion.last_json()["messages"][1]["content"] == "first"
