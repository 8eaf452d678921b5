"""
Weather Proxy Endpoint
"""
from fastapi import APIRouter, Depends, Query, Response
from typing import Optional
import logging

from slctrips.config import settings
from slctrips.services.weather_service import WeatherService, get_weather_service
from slctrips.utils.errors import BadRequest
from slctrips.utils.redis import CacheService, get_redis

router = APIRouter()
logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, s-maxage=600, stale-while-revalidate=300"


@router.get("/weather")
async def get_weather(
    response: Response,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    service: WeatherService = Depends(get_weather_service),
    cache=Depends(get_redis),
):
    """
    Current conditions for a coordinate, cached for ten minutes
    """
    if lat is None or lon is None:
        raise BadRequest("lat and lon parameters required")

    cache_service = CacheService(cache)
    cache_key = f"weather:{lat:.3f}:{lon:.3f}"

    weather = await cache_service.get(cache_key)
    if weather is None:
        weather = await service.current(lat, lon)
        await cache_service.set(cache_key, weather, ttl=settings.CACHE_TTL_WEATHER)
    else:
        logger.debug(f"Cache HIT: {cache_key}")

    response.headers["Cache-Control"] = CACHE_CONTROL
    return weather
