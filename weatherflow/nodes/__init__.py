"""Built-in node handlers, one per node type."""

from .base import NodeHandler
from .builtin import EmailHandler, EndHandler, FormHandler, StartHandler
from .condition import ConditionHandler, evaluate_condition
from .integration import IntegrationHandler

__all__ = [
    "NodeHandler",
    "StartHandler",
    "FormHandler",
    "IntegrationHandler",
    "ConditionHandler",
    "EmailHandler",
    "EndHandler",
    "evaluate_condition",
]
