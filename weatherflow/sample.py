# weatherflow/sample.py
from .models import Edge, Node, NodeData, Position, Workflow

SAMPLE_WORKFLOW_ID = "550e8400-e29b-41d4-a716-446655440000"
SAMPLE_WORKFLOW_NAME = "Weather Alert Workflow"

CITY_OPTIONS = [
    {"city": "Sydney", "lat": -33.8688, "lon": 151.2093},
    {"city": "Melbourne", "lat": -37.8136, "lon": 144.9631},
    {"city": "Brisbane", "lat": -27.4698, "lon": 153.0251},
    {"city": "Perth", "lat": -31.9505, "lon": 115.8605},
    {"city": "Adelaide", "lat": -34.9285, "lon": 138.6007},
]


def sample_nodes():
    return [
        Node(
            id="start", type="start", position=Position(x=-160, y=300),
            data=NodeData(
                label="Start", description="Begin weather check workflow",
                metadata={"hasHandles": {"source": True, "target": False}},
            ),
        ),
        Node(
            id="form", type="form", position=Position(x=152, y=304),
            data=NodeData(
                label="User Input", description="Process collected data - name, email, location",
                metadata={
                    "hasHandles": {"source": True, "target": True},
                    "inputFields": ["name", "email", "city"],
                    "outputVariables": ["name", "email", "city"],
                },
            ),
        ),
        Node(
            id="weather-api", type="integration", position=Position(x=460, y=304),
            data=NodeData(
                label="Weather API", description="Fetch current temperature for {{city}}",
                metadata={
                    "hasHandles": {"source": True, "target": True},
                    "inputVariables": ["city"],
                    "apiEndpoint": "https://api.open-meteo.com/v1/forecast?latitude={lat}&longitude={lon}&current_weather=true",
                    "outputVariables": ["temperature"],
                    "options": [dict(option) for option in CITY_OPTIONS],
                },
            ),
        ),
        Node(
            id="condition", type="condition", position=Position(x=794, y=304),
            data=NodeData(
                label="Check Condition", description="Evaluate temperature threshold",
                metadata={
                    "hasHandles": {"source": ["true", "false"], "target": True},
                    "conditionExpression": "temperature {{operator}} {{threshold}}",
                    "outputVariables": ["conditionMet"],
                },
            ),
        ),
        Node(
            id="email", type="email", position=Position(x=1096, y=88),
            data=NodeData(
                label="Send Alert", description="Email weather alert notification",
                metadata={
                    "hasHandles": {"source": True, "target": True},
                    "inputVariables": ["name", "city", "temperature"],
                    "outputVariables": ["emailSent"],
                    "emailTemplate": {
                        "subject": "Weather Alert",
                        "body": "Weather alert for {{city}}! Temperature is {{temperature}}°C!",
                    },
                },
            ),
        ),
        Node(
            id="end", type="end", position=Position(x=1360, y=302),
            data=NodeData(
                label="Complete", description="Workflow execution finished",
                metadata={"hasHandles": {"source": False, "target": True}},
            ),
        ),
    ]


def sample_edges():
    return [
        Edge(id="e1", source="start", target="form", type="smoothstep", animated=True,
             style={"stroke": "#10b981", "strokeWidth": 3}, label="Initialize"),
        Edge(id="e2", source="form", target="weather-api", type="smoothstep", animated=True,
             style={"stroke": "#3b82f6", "strokeWidth": 3}, label="Submit Data"),
        Edge(id="e3", source="weather-api", target="condition", type="smoothstep", animated=True,
             style={"stroke": "#f97316", "strokeWidth": 3}, label="Temperature Data"),
        Edge(id="e4", source="condition", target="email", type="smoothstep", source_handle="true",
             animated=True, style={"stroke": "#10b981", "strokeWidth": 3}, label="✓ Condition Met",
             label_style={"fill": "#10b981", "fontWeight": "bold"}),
        Edge(id="e5", source="condition", target="end", type="smoothstep", source_handle="false",
             animated=True, style={"stroke": "#6b7280", "strokeWidth": 3}, label="✗ No Alert Needed",
             label_style={"fill": "#6b7280", "fontWeight": "bold"}),
        Edge(id="e6", source="email", target="end", type="smoothstep", animated=True,
             style={"stroke": "#ef4444", "strokeWidth": 2}, label="Alert Sent",
             label_style={"fill": "#ef4444", "fontWeight": "bold"}),
    ]


def sample_workflow() -> Workflow:
    return Workflow(
        id=SAMPLE_WORKFLOW_ID,
        name=SAMPLE_WORKFLOW_NAME,
        nodes=sample_nodes(),
        edges=sample_edges(),
    )
