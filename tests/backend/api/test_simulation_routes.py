"""Tests for simulate, simulation-runs, synthesize-prompt and final-prompts routes."""

BASE_PROMPT = " ".join(f"rule{i}" for i in range(100))


def _setup(client, message_count=2):
    client_id = client.post(
        "/api/clients", json={"name": "Acme", "base_system_prompt": BASE_PROMPT}
    ).json()["id"]
    scenario_id = client.post(
        "/api/scenarios",
        json={"client_id": client_id, "name": "Refund", "goal": "get a refund", "message_count": message_count},
    ).json()["id"]
    return client_id, scenario_id


def test_simulate_returns_one_result_per_valid_scenario(client):
    client_id, scenario_id = _setup(client)
    response = client.post(
        "/api/simulate", json={"clientId": client_id, "scenarioIds": ["missing", scenario_id]}
    )
    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) == 1
    assert results[0]["scenarioId"] == scenario_id
    assert results[0]["status"] == "completed"
    assert results[0]["score"] == 75

    run = client.get(f"/api/simulation-runs/{results[0]['runId']}").json()
    assert run["status"] == "completed"
    assert len(run["conversation"]) == 4


def test_simulate_requires_scenario_ids(client):
    client_id, _ = _setup(client)
    response = client.post("/api/simulate", json={"clientId": client_id, "scenarioIds": []})
    assert response.status_code == 400
    response = client.post("/api/simulate", json={"scenarioIds": ["x"]})
    assert response.status_code == 400


def test_simulate_unknown_client_is_500_with_message(client):
    response = client.post("/api/simulate", json={"clientId": "ghost", "scenarioIds": ["x"]})
    assert response.status_code == 500
    assert response.json() == {"error": "Client not found"}


def test_list_runs_filters(client):
    client_id, scenario_id = _setup(client)
    client.post("/api/simulate", json={"clientId": client_id, "scenarioIds": [scenario_id]})
    client.post("/api/simulate", json={"clientId": client_id, "scenarioIds": [scenario_id]})

    runs = client.get("/api/simulation-runs", params={"client_id": client_id}).json()
    assert len(runs) == 2
    assert runs[0]["created_at"] >= runs[1]["created_at"]
    assert client.get("/api/simulation-runs", params={"scenario_id": "other"}).json() == []


def test_get_missing_run_is_404(client):
    assert client.get("/api/simulation-runs/ghost").status_code == 404


def test_synthesize_prompt_flow(client):
    client_id, scenario_id = _setup(client)
    client.post("/api/simulate", json={"clientId": client_id, "scenarioIds": [scenario_id]})

    response = client.post("/api/synthesize-prompt", json={"clientId": client_id})
    assert response.status_code == 200
    body = response.json()
    assert body["client_id"] == client_id
    assert body["combined_prompt"] == BASE_PROMPT
    assert len(body["source_simulation_run_ids"]) == 1
    assert body["stats"]["originalWordCount"] == 100
    assert body["stats"]["lengthMatch"] is True

    suggestions = client.get("/api/final-prompts", params={"client_id": client_id}).json()
    assert [s["id"] for s in suggestions] == [body["id"]]


def test_synthesize_without_runs_is_500(client):
    client_id, _ = _setup(client)
    response = client.post("/api/synthesize-prompt", json={"clientId": client_id})
    assert response.status_code == 500
    assert response.json() == {"error": "No completed simulation runs found for this client"}


def test_synthesize_requires_client_id(client):
    assert client.post("/api/synthesize-prompt", json={}).status_code == 400
