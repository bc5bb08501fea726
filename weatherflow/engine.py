# weatherflow/engine.py
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .errors import EngineError, NodeExecutionError
from .models import Edge, ExecutionResults, ExecutionState, ExecutionStep, Node, Workflow
from .nodes.condition import BRANCH_KEY
from .registry import Registry

logger = logging.getLogger(__name__)

MAX_STEPS = 100


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class WorkflowEngine:
    """Walks a workflow graph from its start node, one node at a time."""

    def __init__(self, registry: Registry, max_steps: int = MAX_STEPS):
        self.registry = registry
        self.max_steps = max_steps

    async def execute(self, workflow: Workflow, state: ExecutionState) -> ExecutionResults:
        """
        Run ``workflow`` against ``state`` and return the step trace.

        A node failure stops traversal and is reported inside the results
        (status ``failed``). Problems with the graph itself (no start node,
        unknown node type, dangling edge, too many steps) raise EngineError
        and produce no results.
        """
        if state.variables is None:
            state.variables = {}

        started_at = _utc_timestamp()
        started = time.perf_counter()

        current = find_start_node(workflow.nodes)
        edge_map = build_edge_map(workflow.edges)
        node_map: Dict[str, Node] = {node.id: node for node in workflow.nodes}

        logger.debug("running workflow %s from node %s", workflow.id, current.id)
        steps: List[ExecutionStep] = []
        status = "completed"

        while True:
            if len(steps) >= self.max_steps:
                raise EngineError(
                    f"execution exceeded maximum of {self.max_steps} steps (possible cycle)"
                )

            handler = self.registry.get(current.type)
            if handler is None:
                raise EngineError(f'no executor registered for node type "{current.type}"')

            step_started = time.perf_counter()
            error: Optional[NodeExecutionError] = None
            try:
                result = await handler.execute(current, state)
            except NodeExecutionError as e:
                error = e
            duration = _elapsed_ms(step_started)

            step = ExecutionStep(
                step_number=len(steps) + 1,
                node_id=current.id,
                node_type=current.type,
                type=current.type,
                label=current.data.label,
                status="error" if error else result.status,
                duration=duration,
                output={"message": f"Error: {error}"} if error else result.output,
                timestamp=_utc_timestamp(),
                error=str(error) if error else None,
            )
            steps.append(step)

            if error:
                logger.warning("step %d (%s) failed: %s", step.step_number, current.id, error)
                status = "failed"
                break
            logger.debug("step %d (%s): %s", step.step_number, current.id, step.output.get("message"))

            next_node_id = select_next(current, edge_map.get(current.id, []), state)
            # no outgoing edge: terminal node
            if not next_node_id:
                break

            next_node = node_map.get(next_node_id)
            if next_node is None:
                raise EngineError(f'edge target node "{next_node_id}" not found')
            current = next_node

        results = ExecutionResults(
            execution_id=str(uuid.uuid4()),
            status=status,
            start_time=started_at,
            end_time=_utc_timestamp(),
            total_duration=_elapsed_ms(started),
            steps=steps,
        )
        logger.info(
            "workflow %s run %s %s after %d step(s)",
            workflow.id, results.execution_id, status, len(steps),
        )
        return results


def select_next(node: Node, edges: List[Edge], state: ExecutionState) -> str:
    # condition nodes branch on the token they stored; others take the first edge
    if node.type == "condition":
        branch = (state.variables or {}).get(BRANCH_KEY)
        for edge in edges:
            if edge.source_handle == branch:
                return edge.target
        return ""
    if edges:
        return edges[0].target
    return ""


def find_start_node(nodes: List[Node]) -> Node:
    for node in nodes:
        if node.type == "start":
            return node
    raise EngineError("workflow has no start node")


def build_edge_map(edges: List[Edge]) -> Dict[str, List[Edge]]:
    edge_map: Dict[str, List[Edge]] = {}
    for edge in edges:
        edge_map.setdefault(edge.source, []).append(edge)
    return edge_map
