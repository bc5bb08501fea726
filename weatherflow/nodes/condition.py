# weatherflow/nodes/condition.py
import math

from ..errors import NodeExecutionError
from ..models import ExecutionState, Node, NodeResult
from .base import NodeHandler, to_float

# operator -> (symbol, label used in messages)
OPERATORS = {
    "greater_than": (">", "greater than"),
    "less_than": ("<", "less than"),
    "equals": ("=", "equal to"),
    "greater_than_or_equal": (">=", "greater than or equal to"),
    "less_than_or_equal": ("<=", "less than or equal to"),
}

BRANCH_KEY = "conditionResult"


def round_one_decimal(value: float) -> float:
    # half away from zero, so 0.1 + 0.2 compares equal to 0.3
    scaled = value * 10
    if not math.isfinite(scaled):
        # inf and nan pass through unchanged
        return scaled / 10
    magnitude = abs(scaled)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(whole, scaled) / 10


def evaluate_condition(temperature: float, operator: str, threshold: float) -> bool:
    """Compare both values after rounding them to one decimal place.

    The rounding hides binary floating point noise; it is not meant as a
    general precision guarantee. Unknown operators evaluate to False.
    """
    t = round_one_decimal(temperature)
    th = round_one_decimal(threshold)
    if operator == "greater_than":
        return t > th
    elif operator == "less_than":
        return t < th
    elif operator == "equals":
        return t == th
    elif operator == "greater_than_or_equal":
        return t >= th
    elif operator == "less_than_or_equal":
        return t <= th
    return False


class ConditionHandler(NodeHandler):
    node_type = "condition"

    async def execute(self, node: Node, state: ExecutionState) -> NodeResult:
        variables = state.variables or {}
        if "temperature" not in variables:
            raise NodeExecutionError("temperature variable not set")
        temperature, ok = to_float(variables["temperature"])
        if not ok:
            raise NodeExecutionError("temperature is not a number")

        operator = state.condition.operator
        threshold = state.condition.threshold
        result = evaluate_condition(temperature, operator, threshold)
        # the engine picks the outgoing edge whose sourceHandle equals this token
        state.variables[BRANCH_KEY] = "true" if result else "false"

        symbol, label = OPERATORS.get(operator, ("?", operator))
        if result:
            message = f"Temperature {temperature:.1f}°C is {label} {threshold:.1f}°C - condition met"
        else:
            message = f"Temperature {temperature:.1f}°C is not {label} {threshold:.1f}°C - condition not met"

        return NodeResult(output={
            "message": message,
            "conditionMet": result,
            "conditionResult": {
                "expression": f"{temperature:.1f} {symbol} {threshold:.1f}",
                "result": result,
                "temperature": temperature,
                "operator": operator,
                "threshold": threshold,
            },
        })
