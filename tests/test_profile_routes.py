import pytest
from starlette.websockets import WebSocketDisconnect

from companion.core.security import create_identity_token


def test_profile_requires_bearer_token(client):
    response = client.get("/api/profile/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Could not validate credentials"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_profile_rejects_bad_token(client):
    response = client.get("/api/profile/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_first_read_creates_profile(client, auth_headers):
    response = client.get("/api/profile/me", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["uid"] == "user-1"
    assert body["email"] == "amina@example.com"
    assert body["displayName"] == "Amina"
    assert body["language"] == "en"
    assert body["theme"] == "light"
    assert body["notifications"] == {"prayerReminders": True, "adhanSound": True}


def test_patch_merges_fields(client, auth_headers):
    response = client.patch(
        "/api/profile/me",
        json={"theme": "dark", "city": "Cairo", "latitude": 30.04},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["theme"] == "dark"
    assert body["city"] == "Cairo"
    assert body["latitude"] == 30.04
    assert body["language"] == "en"

    assert client.get("/api/profile/me", headers=auth_headers).json()["city"] == "Cairo"


def test_patch_validation(client, auth_headers):
    response = client.patch("/api/profile/me", json={"uid": "hijack"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"

    response = client.patch("/api/profile/me", json={"latitude": 120}, headers=auth_headers)
    assert response.status_code == 400

    response = client.patch("/api/profile/me", json={"theme": "sepia"}, headers=auth_headers)
    assert response.status_code == 400

    response = client.patch("/api/profile/me", json={}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "No profile fields to update"}


def test_stream_rejects_invalid_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/api/profile/ws?token=bad") as ws:
            ws.receive_json()


def test_stream_pushes_snapshots_and_applies_updates(client, token):
    with client.websocket_connect(f"/api/profile/ws?token={token}") as ws:
        initial = [ws.receive_json() for _ in range(3)]
        assert [m["type"] for m in initial] == ["profile", "theme", "language"]
        assert initial[0]["data"]["uid"] == "user-1"

        ws.send_json({"type": "update", "category": "theme", "data": "dark"})
        after_update = [ws.receive_json() for _ in range(4)]
        assert [m["type"] for m in after_update] == ["profile", "theme", "language", "ack"]
        assert after_update[1]["data"] == "dark"
        assert after_update[3]["data"] == {"category": "theme"}

        ws.send_json({"type": "ping"})
        assert ws.receive_json()["type"] == "pong"


def test_stream_reports_bad_updates(client, token):
    with client.websocket_connect(f"/api/profile/ws?token={token}") as ws:
        for _ in range(3):
            ws.receive_json()

        ws.send_json({"type": "update", "category": "language", "data": "fr"})
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["data"]["category"] == "language"

        ws.send_json({"type": "update", "category": "weather", "data": {}})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "dance"})
        assert ws.receive_json()["data"]["error"] == "Unknown message type: dance"


def test_stream_location_update(client):
    token = create_identity_token("user-2", email="yusuf@example.com", name="Yusuf")
    with client.websocket_connect(f"/api/profile/ws?token={token}") as ws:
        for _ in range(3):
            ws.receive_json()

        ws.send_json(
            {"type": "update", "category": "location", "data": {"city": "Fez", "country": "Morocco"}}
        )
        messages = [ws.receive_json() for _ in range(5)]

    assert [m["type"] for m in messages] == ["profile", "location", "theme", "language", "ack"]
    assert messages[1]["data"] == {
        "city": "Fez",
        "country": "Morocco",
        "latitude": None,
        "longitude": None,
    }


def test_patch_rejects_null_for_required_fields(client, auth_headers):
    for field in ("displayName", "language", "theme", "notifications"):
        response = client.patch("/api/profile/me", json={field: None}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"
        assert field in response.json()["details"]

    body = client.get("/api/profile/me", headers=auth_headers).json()
    assert body["displayName"] == "Amina"
    assert body["language"] == "en"


def test_patch_allows_clearing_optional_fields(client, auth_headers):
    client.patch("/api/profile/me", json={"city": "Cairo"}, headers=auth_headers)

    response = client.patch("/api/profile/me", json={"city": None}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["city"] is None


def test_stream_rejects_null_profile_fields(client, token):
    with client.websocket_connect(f"/api/profile/ws?token={token}") as ws:
        for _ in range(3):
            ws.receive_json()

        ws.send_json({"type": "update", "category": "profile", "data": {"displayName": None}})
        error = ws.receive_json()

    assert error["type"] == "error"
    assert error["data"]["category"] == "profile"


def test_stream_survives_malformed_json(client, token):
    with client.websocket_connect(f"/api/profile/ws?token={token}") as ws:
        for _ in range(3):
            ws.receive_json()

        ws.send_text("{not json")
        error = ws.receive_json()

        ws.send_json({"type": "ping"})
        pong = ws.receive_json()

    assert error == {"type": "error", "data": {"error": "Malformed message"}}
    assert pong["type"] == "pong"
