from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

from answer_relay.bus import Coordinator
from answer_relay.persistence import InMemorySettingsStore
from answer_relay.service.answer_service import AnswerService
from answer_relay.service.app import create_app


def _client(responder=None, **stored) -> TestClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(responder or (lambda r: httpx.Response(404))))
    coord = Coordinator(InMemorySettingsStore(stored), service=AnswerService(http_client=http))
    return TestClient(create_app(coord))


def test_health_endpoint():
    client = _client()
    r = client.get("/api/health")
    assert r.status_code == 200  # nosec B101 test assertion
    assert r.json() == {"ok": True}  # nosec B101 test assertion


def test_message_endpoint_ping_and_invalid():
    client = _client()

    pong = client.post("/api/message", json={"action": "ping"})
    bad = client.post("/api/message", json={"action": "nope"})
    not_object = client.post("/api/message", json=["solve"])

    assert pong.json() == {"success": True, "result": {"pong": True}}  # nosec B101 test assertion
    assert bad.status_code == 200  # nosec B101 test assertion
    assert bad.json()["errorKind"] == "format_mismatch"  # nosec B101 test assertion
    assert not_object.json()["errorKind"] == "format_mismatch"  # nosec B101 test assertion


def test_message_endpoint_solves_with_stored_key():
    def _respond(request):
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "A: 4"}]}}]})

    client = _client(_respond, apiKey="AIzaSy-test-key-0001", aiProvider="gemini")

    r = client.post("/api/message", json={"action": "solve", "questionText": "What is 2+2?"})

    assert r.json() == {"success": True, "result": {"text": "A: 4", "mode": "qa"}}  # nosec B101 test assertion


def test_settings_roundtrip_masks_secret():
    client = _client()

    saved = client.post("/api/settings", json={"apiKey": "sk-1234567890abcdef", "provider": "chatgpt"})
    fetched = client.get("/api/settings")

    assert saved.json() == {"ok": True, "apiKey": "sk-12345...cdef"}  # nosec B101 test assertion
    assert fetched.json() == {  # nosec B101 test assertion
        "ok": True,
        "apiKey": "sk-12345...cdef",
        "aiProvider": "chatgpt",
    }


def test_settings_verification_failure_does_not_save():
    client = _client(lambda r: httpx.Response(401))

    r = client.post("/api/settings", json={"apiKey": "AIzaSy-bad-key-0001", "verify": True})

    assert r.json()["ok"] is False  # nosec B101 test assertion
    assert client.get("/api/settings").json()["apiKey"] == ""  # nosec B101 test assertion


def test_message_endpoint_never_returns_the_stored_secret():
    secret = "AIzaSyREALSECRETKEY1234567890"  # pragma: allowlist secret
    client = _client(apiKey=secret, aiProvider="gemini")

    r = client.post("/api/message", json={"action": "getCredential"})

    assert r.json()["success"] is False  # nosec B101 test assertion
    assert r.json()["errorKind"] == "format_mismatch"  # nosec B101 test assertion
    assert secret not in r.text  # nosec B101 test assertion
    assert client.get("/api/settings").json()["apiKey"] == "AIzaSyRE...7890"  # nosec B101 test assertion
