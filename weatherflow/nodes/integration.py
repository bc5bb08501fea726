# weatherflow/nodes/integration.py
import logging
from typing import Any, Mapping, Optional, Tuple

from ..errors import NodeExecutionError, WeatherAPIError
from ..models import ExecutionState, Node, NodeResult
from ..weather import WeatherClient
from .base import NodeHandler, form_str, get_list, get_str, to_float

logger = logging.getLogger(__name__)


class IntegrationHandler(NodeHandler):
    """
    Fetches the current temperature for the city chosen in the form.

    The node's ``metadata.options`` lists the supported cities as
    ``{"city", "lat", "lon"}`` objects. The fetched value is stored in
    ``state.variables["temperature"]`` for the condition and email nodes.
    """
    node_type = "integration"

    def __init__(self, client: WeatherClient):
        self.client = client

    async def execute(self, node: Node, state: ExecutionState) -> NodeResult:
        city = form_str(state, "city")
        metadata = node.data.metadata

        coordinates = find_city(get_list(metadata, "options"), city)
        if coordinates is None:
            raise NodeExecutionError(f'city "{city}" not found in available options')
        lat, lon = coordinates

        endpoint = get_str(metadata, "apiEndpoint")
        try:
            temperature = await self.client.get_temperature(lat, lon)
        except WeatherAPIError as e:
            raise NodeExecutionError(f"weather API error: {e}") from e

        logger.debug("temperature for %s (%.4f, %.4f): %.1f", city, lat, lon, temperature)
        state.variables["temperature"] = temperature

        return NodeResult(output={
            "message": f"Current temperature in {city}: {temperature:.1f}°C",
            "temperature": temperature,
            "location": city,
            # descriptive record of the lookup, not a replay of the HTTP exchange
            "apiResponse": {
                "endpoint": endpoint,
                "method": "GET",
                "statusCode": 200,
                "data": {"temperature": temperature},
            },
        })


def find_city(options: list, city: str) -> Optional[Tuple[float, float]]:
    wanted = city.casefold()
    for option in options:
        if not isinstance(option, Mapping):
            continue
        name: Any = option.get("city")
        if not isinstance(name, str) or name.casefold() != wanted:
            continue
        lat, lat_ok = to_float(option.get("lat"))
        lon, lon_ok = to_float(option.get("lon"))
        if not lat_ok or not lon_ok:
            raise NodeExecutionError(f'invalid coordinates for city "{city}"')
        return lat, lon
    return None
