"""Weather alert workflow engine."""

from .engine import WorkflowEngine
from .errors import EngineError, NodeExecutionError, WeatherAPIError
from .models import ConditionInput, ExecutionResults, ExecutionState, Workflow
from .registry import build_registry

__all__ = [
    "WorkflowEngine",
    "build_registry",
    "Workflow",
    "ExecutionState",
    "ConditionInput",
    "ExecutionResults",
    "EngineError",
    "NodeExecutionError",
    "WeatherAPIError",
]
