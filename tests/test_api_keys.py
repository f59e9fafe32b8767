from tests.conftest import auth_headers, make_token, read_key

U1 = auth_headers("U1")
U2 = auth_headers("U2")


def test_keys_require_auth(client):
    r = client.get("/api/keys")
    assert r.status_code == 401


def test_keys_reject_bad_token(client):
    r = client.get("/api/keys", headers={"Authorization": f"Bearer {make_token('U1', secret='not-the-provider-secret-0123456789')}"})
    assert r.status_code == 401

    r = client.get("/api/keys", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_list_keys_only_shows_own(client, demo_album):
    r = client.get("/api/keys", headers=U1)
    assert r.status_code == 200
    keys = r.json()["api_keys"]
    assert len(keys) == 1
    assert keys[0]["api_key"] == demo_album
    assert keys[0]["album_title"] == "Demo"
    assert keys[0]["usage_count"] == 5

    assert client.get("/api/keys", headers=U2).json()["api_keys"] == []


def test_issue_key_conflicts_with_active_key(client, demo_album):
    r = client.post("/api/keys", params={"album_id": "A1"}, headers=U1)
    assert r.status_code == 409


def test_issue_key_for_foreign_album(client, demo_album):
    r = client.post("/api/keys", params={"album_id": "A1"}, headers=U2)
    assert r.status_code == 404


def test_deactivate_then_issue_new_key(client, demo_album, session_factory):
    r = client.patch("/api/keys/K1", json={"is_active": False}, headers=U1)
    assert r.status_code == 200
    assert r.json()["api_key"]["is_active"] is False
    assert client.get(f"/album-api/{demo_album}").status_code == 401

    r = client.post("/api/keys", params={"album_id": "A1"}, headers=U1)
    assert r.status_code == 200
    new_key = r.json()["api_key"]
    assert new_key["api_key"].startswith("alb_")
    assert new_key["api_key"] != demo_album
    assert new_key["usage_count"] == 0

    r = client.get(f"/album-api/{new_key['api_key']}")
    assert r.status_code == 200
    assert r.json()["usage_info"]["total_calls"] == 1

    # history on the revoked key is kept
    assert read_key(session_factory).usage_count == 5


def test_reactivated_key_works_again(client, demo_album):
    client.patch("/api/keys/K1", json={"is_active": False}, headers=U1)
    client.patch("/api/keys/K1", json={"is_active": True}, headers=U1)

    r = client.get(f"/album-api/{demo_album}")
    assert r.status_code == 200
    assert r.json()["usage_info"]["total_calls"] == 6


def test_cannot_touch_someone_elses_key(client, demo_album):
    assert client.patch("/api/keys/K1", json={"is_active": False}, headers=U2).status_code == 404
    assert client.delete("/api/keys/K1", headers=U2).status_code == 404
    assert client.get("/api/analytics/K1", headers=U2).status_code == 404
    assert client.get(f"/album-api/{demo_album}").status_code == 200


def test_delete_key(client, demo_album, session_factory):
    r = client.delete("/api/keys/K1", headers=U1)
    assert r.status_code == 200
    assert read_key(session_factory) is None
    assert client.get(f"/album-api/{demo_album}").status_code == 401


def test_analytics(client, demo_album):
    client.get(f"/album-api/{demo_album}")
    client.get(f"/album-api/{demo_album}")

    r = client.get("/api/analytics", headers=U1)
    assert r.json() == {"total_keys": 1, "active_keys": 1, "total_calls": 7}

    r = client.get("/api/analytics/K1", headers=U1)
    data = r.json()
    assert data["total_calls"] == 7
    assert data["album_title"] == "Demo"
    assert data["last_used_at"] is not None
