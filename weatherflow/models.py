# weatherflow/models.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # wire format is camelCase; python attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(CamelModel):
    x: float = 0.0
    y: float = 0.0


class NodeData(CamelModel):
    label: str = ""
    description: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Node(CamelModel):
    id: str
    type: str
    position: Position = Field(default_factory=Position)
    data: NodeData = Field(default_factory=NodeData)


class Edge(CamelModel):
    id: str
    source: str
    target: str
    label: str = ""
    type: str = ""
    source_handle: str = ""
    target_handle: str = ""
    animated: bool = False
    style: Dict[str, Any] = Field(default_factory=dict)
    label_style: Dict[str, Any] = Field(default_factory=dict)


class Workflow(CamelModel):
    id: str
    name: str = ""
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ConditionInput(CamelModel):
    operator: str = ""
    threshold: float = 0.0


class ExecuteRequest(CamelModel):
    form_data: Optional[Dict[str, Any]] = None
    condition: ConditionInput = Field(default_factory=ConditionInput)


class ExecutionState(BaseModel):
    """Run-scoped state handed to every node handler.

    ``variables`` accumulates values produced by earlier steps (for example
    ``temperature`` and ``conditionResult``). One instance belongs to one run.
    """
    form_data: Dict[str, Any] = Field(default_factory=dict)
    condition: ConditionInput = Field(default_factory=ConditionInput)
    variables: Optional[Dict[str, Any]] = Field(default_factory=dict)


class NodeResult(BaseModel):
    output: Dict[str, Any]
    status: str = "completed"


class ExecutionStep(CamelModel):
    step_number: int
    node_id: str
    node_type: str
    type: str
    label: str = ""
    status: str
    duration: int
    output: Dict[str, Any]
    timestamp: str
    error: Optional[str] = None


class ExecutionResults(CamelModel):
    execution_id: str
    status: str
    start_time: str
    end_time: str
    total_duration: int
    steps: List[ExecutionStep] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
