# weatherflow/weather.py
import logging
from typing import Optional, Protocol

import httpx

from .errors import WeatherAPIError

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"


class WeatherClient(Protocol):
    async def get_temperature(self, lat: float, lon: float) -> float:
        ...


class OpenMeteoClient:
    """Current temperature (Celsius) from the Open-Meteo forecast API."""

    def __init__(
        self,
        base_url: str = OPEN_METEO_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def get_temperature(self, lat: float, lon: float) -> float:
        params = {
            "latitude": f"{lat:.4f}",
            "longitude": f"{lon:.4f}",
            "current_weather": "true",
        }
        try:
            resp = await self._client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise WeatherAPIError(f"weather API request failed: {e}") from e

        if resp.status_code != 200:
            raise WeatherAPIError(f"weather API returned status {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise WeatherAPIError(f"decode weather response: {e}") from e

        current = payload.get("current_weather") if isinstance(payload, dict) else None
        temperature = current.get("temperature") if isinstance(current, dict) else None
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise WeatherAPIError("weather response has no current temperature")
        return float(temperature)

    async def aclose(self) -> None:
        await self._client.aclose()
