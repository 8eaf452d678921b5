"""
Test Weather Proxy

OpenWeather client against a mocked transport, and the /api/weather endpoint.
"""
import asyncio

import httpx
import pytest

from slctrips.main import app
from slctrips.services.weather_service import WeatherService, get_weather_service, simplify_weather
from slctrips.utils.errors import ConfigurationError, UpstreamFailure

OPENWEATHER_PAYLOAD = {
    "name": "Moab",
    "main": {"temp": 71.6, "feels_like": 70.2, "temp_min": 65.4, "temp_max": 78.5, "humidity": 20, "pressure": 1015},
    "weather": [{"main": "Clear", "description": "clear sky", "icon": "01d"}],
    "wind": {"speed": 7.4, "deg": 210},
    "clouds": {"all": 0},
    "visibility": 16093,
    "sys": {"sunrise": 1697202000, "sunset": 1697242800},
}


def service_returning(status_code, payload=None, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload or {})
    return WeatherService(api_key="test-key", transport=httpx.MockTransport(handler))


class TestSimplifyWeather:

    def test_rounds_and_converts(self):
        weather = simplify_weather(OPENWEATHER_PAYLOAD)
        assert weather["temp"] == 72
        assert weather["temp_max"] == 78
        assert weather["wind_speed"] == 7
        assert weather["visibility"] == 10
        assert weather["description"] == "clear sky"
        assert weather["city_name"] == "Moab"
        assert isinstance(weather["timestamp"], int)

    def test_sparse_payload_uses_defaults(self):
        weather = simplify_weather({})
        assert weather["temp"] == 0
        assert weather["main"] == "Unknown"
        assert weather["icon"] == "01d"
        assert weather["visibility"] is None
        assert weather["city_name"] == "Unknown"


class TestWeatherService:

    def test_requests_imperial_units(self):
        seen = []
        weather = asyncio.run(service_returning(200, OPENWEATHER_PAYLOAD, seen).current(38.57, -109.55))

        assert weather["temp"] == 72
        params = seen[0].url.params
        assert params["units"] == "imperial"
        assert params["appid"] == "test-key"
        assert seen[0].url.path.endswith("/weather")

    def test_missing_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(WeatherService(api_key="").current(1, 2))
        assert exc_info.value.status_code == 503
        assert exc_info.value.to_dict() == {
            "error": "Weather service unavailable",
            "message": "API key not configured",
        }

    def test_upstream_error_status(self):
        with pytest.raises(UpstreamFailure) as exc_info:
            asyncio.run(service_returning(401).current(1, 2))
        assert exc_info.value.status_code == 500
        assert exc_info.value.error == "Failed to fetch weather"
        assert exc_info.value.message == "OpenWeather API error: 401"

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = WeatherService(api_key="test-key", transport=httpx.MockTransport(handler))
        with pytest.raises(UpstreamFailure):
            asyncio.run(service.current(1, 2))


class TestWeatherEndpoint:

    @pytest.fixture
    def use_service(self, client):
        def install(service):
            app.dependency_overrides[get_weather_service] = lambda: service
        return install

    def test_returns_weather_with_cache_header(self, client, use_service):
        use_service(service_returning(200, OPENWEATHER_PAYLOAD))
        response = client.get("/api/weather", params={"lat": 38.57, "lon": -109.55})

        assert response.status_code == 200
        assert response.json()["city_name"] == "Moab"
        assert response.headers["cache-control"] == "public, s-maxage=600, stale-while-revalidate=300"

    @pytest.mark.parametrize("params", [{}, {"lat": 40.7}, {"lon": -111.9}])
    def test_requires_both_coordinates(self, client, params):
        response = client.get("/api/weather", params=params)
        assert response.status_code == 400
        assert response.json() == {"error": "Bad Request", "message": "lat and lon parameters required"}

    def test_unconfigured_service_is_503(self, client, use_service):
        use_service(WeatherService(api_key=""))
        response = client.get("/api/weather", params={"lat": 40.7, "lon": -111.9})
        assert response.status_code == 503
        assert response.json()["error"] == "Weather service unavailable"

    def test_upstream_failure_is_500(self, client, use_service):
        use_service(service_returning(502))
        response = client.get("/api/weather", params={"lat": 40.7, "lon": -111.9})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch weather", "message": "OpenWeather API error: 502"}
