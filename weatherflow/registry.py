# weatherflow/registry.py
from typing import Dict

from .nodes import (
    ConditionHandler,
    EmailHandler,
    EndHandler,
    FormHandler,
    IntegrationHandler,
    NodeHandler,
    StartHandler,
)
from .weather import WeatherClient

# node type -> handler executing nodes of that type
Registry = Dict[str, NodeHandler]


def build_registry(weather_client: WeatherClient) -> Registry:
    handlers = [
        StartHandler(),
        FormHandler(),
        IntegrationHandler(weather_client),
        ConditionHandler(),
        EmailHandler(),
        EndHandler(),
    ]
    return {handler.node_type: handler for handler in handlers}
