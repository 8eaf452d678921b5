"""
Weather Service - current conditions from OpenWeather for a coordinate
"""
from typing import Any, Dict, Optional
import httpx
import logging
import time

from slctrips.config import settings
from slctrips.utils.errors import ConfigurationError, UpstreamFailure

logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.34


def simplify_weather(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce an OpenWeather response to what destination pages show"""
    main = payload.get("main") or {}
    conditions = (payload.get("weather") or [{}])[0]
    wind = payload.get("wind") or {}
    sys = payload.get("sys") or {}
    visibility = payload.get("visibility")

    return {
        "temp": round(main.get("temp", 0)),
        "feels_like": round(main.get("feels_like", 0)),
        "temp_min": round(main.get("temp_min", 0)),
        "temp_max": round(main.get("temp_max", 0)),
        "humidity": main.get("humidity"),
        "pressure": main.get("pressure"),
        "description": conditions.get("description", "Unknown"),
        "main": conditions.get("main", "Unknown"),
        "icon": conditions.get("icon", "01d"),
        "wind_speed": round(wind.get("speed") or 0),
        "wind_deg": wind.get("deg") or 0,
        "clouds": (payload.get("clouds") or {}).get("all", 0),
        "visibility": round(visibility / METERS_PER_MILE) if visibility else None,
        "sunrise": sys.get("sunrise"),
        "sunset": sys.get("sunset"),
        "city_name": payload.get("name") or "Unknown",
        "timestamp": int(time.time() * 1000),
    }


class WeatherService:
    """
    Thin client for the OpenWeather current-conditions endpoint.
    One request per call, imperial units.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = settings.OPENWEATHER_BASE_URL,
        timeout: float = settings.WEATHER_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def current(self, lat: float, lon: float) -> Dict[str, Any]:
        if not self.is_configured:
            logger.warning("OPENWEATHER_API_KEY not configured")
            raise ConfigurationError(
                "API key not configured",
                error="Weather service unavailable",
            )

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/weather",
                    params={"lat": lat, "lon": lon, "appid": self.api_key, "units": "imperial"},
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise UpstreamFailure(
                    f"OpenWeather API error: {e.response.status_code}",
                    error="Failed to fetch weather",
                )
            except httpx.HTTPError as e:
                raise UpstreamFailure(str(e) or "OpenWeather request failed", error="Failed to fetch weather")

        return simplify_weather(response.json())


def get_weather_service() -> WeatherService:
    return WeatherService(api_key=settings.OPENWEATHER_API_KEY)
