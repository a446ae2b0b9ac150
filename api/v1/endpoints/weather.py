from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from agents.base import agent_registry
from agents.weather.models import AssessmentRequest, WeatherRequest
from core.exceptions import AgentError

router = APIRouter()


def _weather_agent():
    weather_agent = agent_registry.get("weather")
    if not weather_agent:
        raise AgentError("Weather agent not available")
    return weather_agent


@router.get("/report")
async def get_weather_report(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude of the location"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude of the location"),
    city: Optional[str] = Query(None, description="City name, used when no coordinates are given"),
    use_cache: bool = Query(True, description="Reuse a recent report for the same location"),
):
    """
    Get current weather, daily forecast, agronomic assessment and alerts

    Falls back to demo data (success=false) when the weather provider is
    not reachable or not configured.
    """
    weather_agent = _weather_agent()
    try:
        request = WeatherRequest(lat=lat, lon=lon, city=city.strip() if city else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return await weather_agent.execute(request, use_cache=use_cache)


@router.post("/assessment")
async def assess_weather(request: AssessmentRequest):
    """Agronomic assessment and alerts for caller supplied weather"""
    weather_agent = _weather_agent()
    return weather_agent.assess(request)


@router.get("/locations")
async def search_locations(
    q: str = Query(..., min_length=1, description="City name to search for"),
):
    """
    Resolve a city name to coordinates

    Provider and configuration failures surface as 502.
    """
    weather_agent = _weather_agent()
    locations = await weather_agent.search_locations(q.strip())
    return {
        "success": True,
        "locations": locations,
    }


@router.get("/health")
async def weather_health():
    """Check weather agent health"""
    weather_agent = agent_registry.get("weather")
    if not weather_agent:
        return {"status": "unhealthy", "error": "Weather agent not available"}
    return await weather_agent.health_check()
