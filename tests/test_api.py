import asyncio
import hashlib
import json

from app.domain.models import HistoryEntry
from conftest import TOKYO_PLAN

HEADERS = {"X-Forwarded-For": "198.51.100.20"}
CALLER = hashlib.sha256(b"198.51.100.20").hexdigest()


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_plan_tokyo(client, repo):
    response = client.post("/api/plan", json={"destination": "Tokyo", "days": "3"}, headers=HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert isinstance(data["itinerary"], list)
    assert data["images"]
    assert "Tokyo" in data["images"][0]


def test_plan_history_is_scoped_to_caller(client):
    client.post("/api/plan", json={"destination": "Tokyo"}, headers=HEADERS)

    mine = client.get("/api/history", headers=HEADERS).json()
    assert mine["total"] == 1
    assert mine["page"] == 1
    assert mine["totalPages"] == 1
    assert mine["results"][0]["userHash"] == CALLER
    assert mine["results"][0]["request"]["destination"] == "Tokyo"

    theirs = client.get("/api/history", headers={"X-Forwarded-For": "192.0.2.1"}).json()
    assert theirs == {"page": 1, "totalPages": 1, "total": 0, "results": []}


def test_plan_unknown_field(client, fake_model):
    response = client.post("/api/plan", json={"destination": "Tokyo", "hack": "1"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid fields"}
    assert fake_model.calls == []


def test_plan_missing_destination(client):
    response = client.post("/api/plan", json={"days": "2"})
    assert response.status_code == 400
    assert response.json() == {"error": "Destination required"}


def test_plan_upstream_empty(client, fake_model):
    fake_model.replies = [None]
    response = client.post("/api/plan", json={"destination": "Tokyo"})
    assert response.status_code == 502
    assert response.json() == {"error": "No response from model"}


def test_plan_parse_failure_includes_raw(client, fake_model):
    fake_model.replies = ["I cannot produce JSON right now."]
    response = client.post("/api/plan", json={"destination": "Tokyo"})
    assert response.status_code == 500
    assert response.json() == {"error": "Model output not valid JSON", "raw": "I cannot produce JSON right now."}


def test_chat_round_trip(client, fake_model, repo):
    fake_model.replies = ["Claro:\n" + json.dumps(TOKYO_PLAN)]
    response = client.post(
        "/api/chat",
        json={"messages": [{"role": "user", "content": "3 días en Tokio"}], "group": "pareja"},
        headers=HEADERS,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["parsed"] == TOKYO_PLAN
    assert body["text"].startswith("Claro:")

    history = client.get("/api/history", headers=HEADERS).json()
    assert history["results"][0]["request"] == {"chat": True, "group": "pareja", "snippet": "3 días en Tokio"}


def test_chat_plain_reply(client, fake_model):
    fake_model.replies = ["¿Qué destino te interesa?"]
    response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "hola"}]})
    assert response.status_code == 200
    assert response.json() == {"text": "¿Qué destino te interesa?", "parsed": None}


def test_chat_requires_messages(client):
    response = client.post("/api/chat", json={"messages": "hola"})
    assert response.status_code == 400
    assert response.json() == {"error": "messages array required"}


def test_history_pagination_params(client, fake_model):
    fake_model.replies = [json.dumps(TOKYO_PLAN)] * 12
    for idx in range(12):
        client.post("/api/plan", json={"destination": f"City {idx}"}, headers=HEADERS)

    body = client.get("/api/history?page=3&limit=5", headers=HEADERS).json()
    assert body["page"] == 3
    assert body["total"] == 12
    assert body["totalPages"] == 3
    assert len(body["results"]) == 2


def test_history_bad_params_fall_back_to_defaults(client):
    response = client.get("/api/history?page=abc&limit=xyz", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["page"] == 1


def test_delete_unknown_entry(client):
    response = client.delete("/api/history/does-not-exist", headers=HEADERS)
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_delete_other_users_entry_is_forbidden(client, repo):
    client.post("/api/plan", json={"destination": "Tokyo"}, headers=HEADERS)
    entry_id = client.get("/api/history", headers=HEADERS).json()["results"][0]["id"]

    response = client.delete(f"/api/history/{entry_id}", headers={"X-Forwarded-For": "192.0.2.1"})
    assert response.status_code == 403
    assert response.json() == {"error": "Not authorized"}

    response = client.delete(f"/api/history/{entry_id}", headers=HEADERS)
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/api/history", headers=HEADERS).json()["total"] == 0


def test_trending(client, repo):
    for destination in ["Paris", "paris", "PARIS, France", "Roma"]:
        asyncio.run(repo.append(HistoryEntry(user_hash=CALLER, request={"destination": destination}, response={})))

    response = client.get("/api/trending")
    assert response.status_code == 200
    assert response.json() == {"results": [{"name": "Paris", "tag": "paris"}, {"name": "Roma", "tag": "roma"}]}


def test_banner_falls_back_when_model_is_silent(client, fake_model, test_settings):
    fake_model.replies = [None]
    response = client.get("/api/banner")
    assert response.status_code == 200
    assert response.json() == {"text": test_settings.banner_fallback}


def test_banner_uses_model_phrase(client, fake_model):
    fake_model.replies = ["El mundo te espera."]
    assert client.get("/api/banner").json() == {"text": "El mundo te espera."}


def test_history_params_use_leading_digits(client, fake_model):
    fake_model.replies = [json.dumps(TOKYO_PLAN)] * 6
    for idx in range(6):
        client.post("/api/plan", json={"destination": f"City {idx}"}, headers=HEADERS)

    body = client.get("/api/history?page=2abc&limit=5.5", headers=HEADERS).json()
    assert body["page"] == 2
    assert body["totalPages"] == 2
    assert len(body["results"]) == 1
