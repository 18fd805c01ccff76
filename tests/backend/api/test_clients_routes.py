"""Tests for client API routes."""


def _create(client, **fields):
    payload = {"name": "Acme", "industry": "Retail", **fields}
    response = client.post("/api/clients", json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_client_defaults_empty_fields(client):
    body = _create(client)
    assert body["id"]
    assert body["name"] == "Acme"
    assert body["policies"] == ""
    assert body["base_system_prompt"] == ""
    assert body["created_at"] == body["updated_at"]


def test_create_client_requires_name(client):
    response = client.post("/api/clients", json={"industry": "Retail"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_list_clients_newest_first(client):
    first = _create(client, name="First")
    second = _create(client, name="Second")
    response = client.get("/api/clients")
    assert response.status_code == 200
    ids = [c["id"] for c in response.json()]
    assert ids == [second["id"], first["id"]]


def test_get_client(client):
    created = _create(client)
    response = client.get(f"/api/clients/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_missing_client_is_404(client):
    response = client.get("/api/clients/nonexistent")
    assert response.status_code == 404
    assert response.json() == {"error": "Client not found"}


def test_put_overwrites_and_refreshes_updated_at(client):
    created = _create(client, policies="30 day refunds")
    response = client.put(f"/api/clients/{created['id']}", json={"name": "Acme 2"})
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Acme 2"
    assert body["industry"] == ""
    assert body["policies"] == ""
    assert body["created_at"] == created["created_at"]
    assert body["updated_at"] >= created["updated_at"]


def test_put_missing_client_is_404(client):
    response = client.put("/api/clients/nonexistent", json={"name": "X"})
    assert response.status_code == 404


def test_delete_leaves_children_fetchable(client):
    created = _create(client)
    scenario = client.post(
        "/api/scenarios", json={"client_id": created["id"], "name": "Refund"}
    ).json()

    response = client.delete(f"/api/clients/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert client.get(f"/api/clients/{created['id']}").status_code == 404
    orphan = client.get(f"/api/scenarios/{scenario['id']}")
    assert orphan.status_code == 200
    assert orphan.json()["client_id"] == created["id"]


def test_delete_missing_client_succeeds(client):
    response = client.delete("/api/clients/nonexistent")
    assert response.status_code == 200
    assert response.json() == {"success": True}
