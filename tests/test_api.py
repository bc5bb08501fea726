# tests/test_api.py
from fastapi.testclient import TestClient

from weatherflow.errors import StorageError
from weatherflow.main import create_app
from weatherflow.models import Node, Workflow
from weatherflow.repository import InMemoryWorkflowRepository

from conftest import TEST_WORKFLOW_ID, FakeWeatherClient

EXECUTE_URL = f"/api/v1/workflows/{TEST_WORKFLOW_ID}/execute"


def execute_payload(**overrides):
    payload = {
        "formData": {"name": "Alice", "email": "alice@example.com", "city": "Sydney"},
        "condition": {"operator": "greater_than", "threshold": 25},
    }
    payload.update(overrides)
    return payload


class BrokenRepository(InMemoryWorkflowRepository):
    async def get(self, workflow_id):
        raise StorageError("connection reset")


def test_health(test_client: TestClient):
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_node_types(test_client: TestClient):
    response = test_client.get("/api/v1/node-types")
    assert response.json() == {
        "nodeTypes": ["condition", "email", "end", "form", "integration", "start"],
    }


def test_get_workflow(test_client: TestClient):
    response = test_client.get(f"/api/v1/workflows/{TEST_WORKFLOW_ID}")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == TEST_WORKFLOW_ID
    assert len(body["nodes"]) == 6
    assert len(body["edges"]) == 6
    branch = next(e for e in body["edges"] if e["id"] == "e4")
    assert branch["sourceHandle"] == "true"


def test_get_workflow_not_found(test_client: TestClient):
    response = test_client.get("/api/v1/workflows/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json() == {"message": "workflow not found"}


def test_get_workflow_invalid_id(test_client: TestClient):
    response = test_client.get("/api/v1/workflows/not-a-uuid")

    assert response.status_code == 400
    assert response.json() == {"message": "invalid workflow id"}


def test_execute_workflow(test_client: TestClient):
    response = test_client.post(EXECUTE_URL, json=execute_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["executionId"]
    assert [s["nodeType"] for s in body["steps"]] == [
        "start", "form", "integration", "condition", "email", "end",
    ]
    first = body["steps"][0]
    assert first["stepNumber"] == 1
    assert first["nodeId"] == "start"
    assert first["type"] == "start"
    assert "error" not in first
    assert isinstance(body["totalDuration"], int)


def test_execute_failed_run_is_still_200(settings, repository):
    app = create_app(settings, repository=repository, weather_client=FakeWeatherClient(error="timeout"))
    with TestClient(app) as client:
        response = client.post(EXECUTE_URL, json=execute_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "failed"
    assert len(body["steps"]) == 3
    assert body["steps"][-1]["error"] == "weather API error: timeout"


def test_execute_missing_field(test_client: TestClient):
    payload = execute_payload(formData={"name": "Alice", "email": "alice@example.com"})
    response = test_client.post(EXECUTE_URL, json=payload)

    assert response.status_code == 400
    assert response.json() == {"message": "city is required"}


def test_execute_missing_form_data(test_client: TestClient):
    response = test_client.post(EXECUTE_URL, json={"condition": {"operator": "equals", "threshold": 1}})

    assert response.status_code == 400
    assert response.json() == {"message": "formData is required"}


def test_execute_invalid_operator(test_client: TestClient):
    payload = execute_payload(condition={"operator": "between", "threshold": 25})
    response = test_client.post(EXECUTE_URL, json=payload)

    assert response.status_code == 400
    assert response.json() == {"message": "operator is invalid"}


def test_execute_invalid_json(test_client: TestClient):
    response = test_client.post(
        EXECUTE_URL, content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"message": "invalid request body"}


def test_execute_not_found(test_client: TestClient):
    response = test_client.post(
        "/api/v1/workflows/00000000-0000-0000-0000-000000000000/execute", json=execute_payload()
    )

    assert response.status_code == 404
    assert response.json() == {"message": "workflow not found"}


def test_execute_engine_error_is_500(settings, weather_client):
    broken = Workflow(id=TEST_WORKFLOW_ID, nodes=[Node(id="end", type="end")])
    app = create_app(
        settings, repository=InMemoryWorkflowRepository([broken]), weather_client=weather_client
    )
    with TestClient(app) as client:
        response = client.post(EXECUTE_URL, json=execute_payload())

    assert response.status_code == 500
    assert response.json() == {"message": "internal server error"}


def test_storage_error_is_500(settings, weather_client):
    app = create_app(settings, repository=BrokenRepository(), weather_client=weather_client)
    with TestClient(app) as client:
        response = client.get(f"/api/v1/workflows/{TEST_WORKFLOW_ID}")

    assert response.status_code == 500
    assert response.json() == {"message": "internal server error"}


def test_seeded_sample_workflow(settings, weather_client):
    app = create_app(settings, repository=InMemoryWorkflowRepository(seed=True), weather_client=weather_client)
    with TestClient(app) as client:
        response = client.post(
            "/api/v1/workflows/550e8400-e29b-41d4-a716-446655440000/execute",
            json=execute_payload(formData={"name": "Bo", "email": "bo@example.com", "city": "melbourne"}),
        )

    assert response.status_code == 200
    email_step = response.json()["steps"][4]
    assert email_step["output"]["emailDraft"]["body"] == "Weather alert for melbourne! Temperature is 30.0°C!"


def test_execute_huge_threshold(test_client: TestClient):
    payload = execute_payload(condition={"operator": "less_than", "threshold": 1e308})
    response = test_client.post(EXECUTE_URL, json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["steps"][3]["output"]["conditionMet"] is True


def test_storage_error_is_logged_with_traceback(settings, weather_client, caplog):
    app = create_app(settings, repository=BrokenRepository(), weather_client=weather_client)
    with TestClient(app) as client:
        client.get(f"/api/v1/workflows/{TEST_WORKFLOW_ID}")

    records = [r for r in caplog.records if r.name == "weatherflow.main" and r.levelname == "ERROR"]
    assert len(records) == 1
    assert isinstance(records[0].exc_info[1], StorageError)


def test_engine_error_is_logged_with_traceback(settings, weather_client, caplog):
    broken = Workflow(id=TEST_WORKFLOW_ID, nodes=[Node(id="end", type="end")])
    app = create_app(
        settings, repository=InMemoryWorkflowRepository([broken]), weather_client=weather_client
    )
    with TestClient(app) as client:
        client.post(EXECUTE_URL, json=execute_payload())

    records = [r for r in caplog.records if r.name == "weatherflow.main" and r.levelname == "ERROR"]
    assert len(records) == 1
    assert "no start node" in str(records[0].exc_info[1])
