"""Tests for VAPID keys, subscriptions and push fan-out."""

import base64
import json

import pytest

from digpaper.services import push_service
from digpaper.services.push_service import build_payload


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code


@pytest.fixture
def sent(monkeypatch):
    """Substitui o webpush; endpoints com 'gone' respondem 410, 'broken' 500"""
    calls = []

    def fake_webpush(subscription_info, data, vapid_private_key, vapid_claims):
        endpoint = subscription_info["endpoint"]
        if "gone" in endpoint:
            calls.append((endpoint, None, None))
            raise push_service.WebPushException("Gone", response=FakeResponse(410))
        if "broken" in endpoint:
            raise push_service.WebPushException("Server error", response=FakeResponse(500))
        calls.append((endpoint, json.loads(data), vapid_claims))

    monkeypatch.setattr(push_service, "webpush", fake_webpush)
    return calls


def _subscribe(client, endpoint, author=None):
    response = client.post("/api/push/subscribe", json={
        "endpoint": endpoint, "p256dh": "key", "auth": "secret", "author_name": author,
    })
    assert response.status_code == 201


def test_vapid_key_is_raw_p256_point(client):
    key = client.get("/api/push/vapid-key").json()["publicKey"]

    raw = base64.urlsafe_b64decode(key + "=" * (-len(key) % 4))
    assert len(raw) == 65
    assert raw[0] == 0x04
    assert "=" not in key


def test_payload_truncates_long_content():
    payload = build_payload("Obra X", "Rui", "a" * 150)

    assert payload["title"] == "Obra X - Rui"
    assert payload["tag"] == "Obra X"
    assert len(payload["body"]) == 100
    assert payload["body"].endswith("...")
    assert build_payload("Obra X", "Rui", "curto")["body"] == "curto"


def test_forum_message_notifies_everyone_but_author(client, create_project, sent):
    project = create_project("Obra X")
    _subscribe(client, "https://push.example/rui", author="Rui")
    _subscribe(client, "https://push.example/ana", author="Ana")
    _subscribe(client, "https://push.example/anon")

    client.post(f"/api/projects/{project['id']}/forum", json={
        "message_type": "TEXT", "content": "Chegou a madeira", "author_name": "Rui",
    })

    endpoints = sorted(endpoint for endpoint, _, _ in sent)
    assert endpoints == ["https://push.example/ana", "https://push.example/anon"]
    _, payload, claims = sent[0]
    assert payload == {"title": "Obra X - Rui", "body": "Chegou a madeira", "tag": "Obra X"}
    assert claims["sub"].startswith("mailto:")


def test_reply_notification_title(client, create_project, sent):
    project = create_project()
    message = client.post(f"/api/projects/{project['id']}/forum", json={
        "message_type": "TEXT", "content": "?", "author_name": "Rui",
    }).json()
    _subscribe(client, "https://push.example/rui", author="Rui")

    client.post(f"/api/forum/{message['id']}/replies", json={"content": "Sim", "author_name": "Ana"})

    assert [payload["title"] for _, payload, _ in sent] == ["Resposta - Ana"]


def test_expired_subscription_is_removed(client, create_project, sent):
    project = create_project()
    _subscribe(client, "https://push.example/gone")
    _subscribe(client, "https://push.example/broken")
    _subscribe(client, "https://push.example/ok")

    for _ in range(2):
        response = client.post(f"/api/projects/{project['id']}/forum", json={
            "message_type": "TEXT", "content": "x", "author_name": "Rui",
        })
        assert response.status_code == 201

    # 'gone' recebe 410 na primeira vez e deixa de existir; 'broken' continua
    endpoints = [endpoint for endpoint, _, _ in sent]
    assert endpoints.count("https://push.example/gone") == 1
    assert endpoints.count("https://push.example/ok") == 2


def test_subscribe_is_upsert_and_unsubscribe(client, create_project, sent):
    project = create_project()
    _subscribe(client, "https://push.example/a", author="Rui")
    _subscribe(client, "https://push.example/a", author="Ana")

    client.post(f"/api/projects/{project['id']}/forum", json={
        "message_type": "TEXT", "content": "x", "author_name": "Rui",
    })
    assert len(sent) == 1

    assert client.post("/api/push/unsubscribe", json={"endpoint": "https://push.example/a"}).status_code == 204
    client.post(f"/api/projects/{project['id']}/forum", json={
        "message_type": "TEXT", "content": "y", "author_name": "Rui",
    })
    assert len(sent) == 1
