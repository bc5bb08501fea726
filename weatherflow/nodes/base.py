# weatherflow/nodes/base.py
from typing import Any, Dict, List, Mapping, Tuple

from ..errors import NodeExecutionError
from ..models import ExecutionState, Node, NodeResult


class NodeHandler:
    """Executes every node of one type.

    Handlers read the node and the run state, may write to
    ``state.variables``, and return a ``NodeResult`` whose output carries a
    ``message``. Failures are raised as ``NodeExecutionError``. Handlers keep
    no per-run attributes so one instance can serve concurrent runs.
    """
    node_type: str

    async def execute(self, node: Node, state: ExecutionState) -> NodeResult:
        raise NotImplementedError


def to_float(value: Any) -> Tuple[float, bool]:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        return 0.0, False
    if isinstance(value, (int, float)):
        return float(value), True
    return 0.0, False


def get_list(metadata: Mapping[str, Any], key: str) -> List[Any]:
    value = metadata.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise NodeExecutionError(f"metadata field {key} must be a list")
    return list(value)


def get_mapping(metadata: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = metadata.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise NodeExecutionError(f"metadata field {key} must be an object")
    return dict(value)


def get_str(metadata: Mapping[str, Any], key: str, default: str = "") -> str:
    value = metadata.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise NodeExecutionError(f"metadata field {key} must be a string")
    return value


def form_str(state: ExecutionState, field: str) -> str:
    value = state.form_data.get(field)
    return value if isinstance(value, str) else ""
