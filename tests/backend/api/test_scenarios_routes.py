"""Tests for scenario API routes."""


def _client_id(client) -> str:
    return client.post("/api/clients", json={"name": "Acme"}).json()["id"]


def test_create_scenario_with_defaults(client):
    client_id = _client_id(client)
    response = client.post("/api/scenarios", json={"client_id": client_id, "name": "Refund"})
    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "general"
    assert body["message_count"] == 8
    assert body["is_active"] is True
    assert body["created_at"]


def test_create_scenario_for_missing_client_is_404(client):
    response = client.post("/api/scenarios", json={"client_id": "ghost", "name": "Refund"})
    assert response.status_code == 404


def test_message_count_out_of_range_is_400(client):
    client_id = _client_id(client)
    response = client.post(
        "/api/scenarios", json={"client_id": client_id, "name": "Long", "message_count": 50}
    )
    assert response.status_code == 400


def test_list_scenarios_filters_by_client(client):
    first = _client_id(client)
    second = _client_id(client)
    client.post("/api/scenarios", json={"client_id": first, "name": "A"})
    client.post("/api/scenarios", json={"client_id": first, "name": "B"})
    client.post("/api/scenarios", json={"client_id": second, "name": "C"})

    response = client.get("/api/scenarios", params={"client_id": first})
    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["B", "A"]
    assert len(client.get("/api/scenarios").json()) == 3


def test_update_scenario_keeps_owner(client):
    client_id = _client_id(client)
    created = client.post("/api/scenarios", json={"client_id": client_id, "name": "Refund"}).json()
    response = client.put(
        f"/api/scenarios/{created['id']}", json={"goal": "get money back", "is_active": False}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["goal"] == "get money back"
    assert body["is_active"] is False
    assert body["name"] == "Refund"
    assert body["client_id"] == client_id
    assert body["created_at"] == created["created_at"]


def test_update_missing_scenario_is_404(client):
    assert client.put("/api/scenarios/ghost", json={"name": "X"}).status_code == 404


def test_delete_scenario(client):
    client_id = _client_id(client)
    created = client.post("/api/scenarios", json={"client_id": client_id, "name": "Refund"}).json()
    response = client.delete(f"/api/scenarios/{created['id']}")
    assert response.json() == {"success": True}
    assert client.get(f"/api/scenarios/{created['id']}").status_code == 404
