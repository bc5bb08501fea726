"""
Shared fixtures for the weatherflow test suite.
"""
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from weatherflow.config import Settings
from weatherflow.engine import WorkflowEngine
from weatherflow.errors import WeatherAPIError
from weatherflow.main import create_app
from weatherflow.models import ConditionInput, Edge, ExecutionState, Node, NodeData, Workflow
from weatherflow.registry import build_registry
from weatherflow.repository import InMemoryWorkflowRepository

TEST_WORKFLOW_ID = "550e8400-e29b-41d4-a716-446655440000"


class FakeWeatherClient:
    """Returns a fixed temperature, or raises when ``error`` is set."""

    def __init__(self, temperature: float = 0.0, error: Optional[str] = None):
        self.temperature = temperature
        self.error = error
        self.calls: List[tuple] = []

    async def get_temperature(self, lat: float, lon: float) -> float:
        self.calls.append((lat, lon))
        if self.error:
            raise WeatherAPIError(self.error)
        return self.temperature


def make_workflow(workflow_id: str = TEST_WORKFLOW_ID) -> Workflow:
    return Workflow(
        id=workflow_id,
        name="Test Workflow",
        nodes=[
            Node(id="start", type="start", data=NodeData(label="Start")),
            Node(id="form", type="form", data=NodeData(label="User Input")),
            Node(
                id="weather-api", type="integration",
                data=NodeData(
                    label="Weather API",
                    metadata={
                        "apiEndpoint": "https://api.open-meteo.com/v1/forecast",
                        "options": [{"city": "Sydney", "lat": -33.8688, "lon": 151.2093}],
                    },
                ),
            ),
            Node(id="condition", type="condition", data=NodeData(label="Check Condition")),
            Node(
                id="email", type="email",
                data=NodeData(
                    label="Send Alert",
                    metadata={
                        "emailTemplate": {
                            "subject": "Weather Alert",
                            "body": "Alert for {{city}}! Temp: {{temperature}}°C!",
                        },
                    },
                ),
            ),
            Node(id="end", type="end", data=NodeData(label="Complete")),
        ],
        edges=[
            Edge(id="e1", source="start", target="form"),
            Edge(id="e2", source="form", target="weather-api"),
            Edge(id="e3", source="weather-api", target="condition"),
            Edge(id="e4", source="condition", target="email", source_handle="true"),
            Edge(id="e5", source="condition", target="end", source_handle="false"),
            Edge(id="e6", source="email", target="end"),
        ],
    )


def make_state(operator: str = "greater_than", threshold: float = 25, **form) -> ExecutionState:
    form_data = {"name": "Alice", "email": "alice@example.com", "city": "Sydney"}
    form_data.update(form)
    return ExecutionState(
        form_data=form_data,
        condition=ConditionInput(operator=operator, threshold=threshold),
        variables={},
    )


def make_engine(temperature: float = 30.0, error: Optional[str] = None, max_steps: int = 100) -> WorkflowEngine:
    return WorkflowEngine(build_registry(FakeWeatherClient(temperature, error)), max_steps=max_steps)


@pytest.fixture
def workflow() -> Workflow:
    return make_workflow()


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:", LOG_LEVEL="DEBUG")


@pytest.fixture
def weather_client() -> FakeWeatherClient:
    return FakeWeatherClient(temperature=30.0)


@pytest.fixture
def repository(workflow) -> InMemoryWorkflowRepository:
    return InMemoryWorkflowRepository([workflow])


@pytest.fixture
def test_client(settings, repository, weather_client):
    app = create_app(settings, repository=repository, weather_client=weather_client)
    with TestClient(app) as client:
        yield client
