# scripts/check_agents.py
"""
Smoke check that the agents work independently of the API
"""

import asyncio
import sys
from datetime import date, datetime, timezone

import httpx

from agents.crops.agent import CropLifecycleAgent
from agents.crops.models import CropStatusRequest
from agents.weather.agent import WeatherAdvisoryAgent
from agents.weather.models import WeatherRequest
from core.config import get_settings
from core.logging import setup_logging


async def check_crops_agent() -> bool:
    """Crop lifecycle agent on a mid-cycle crop"""
    print("Checking crop lifecycle agent")
    print("=" * 50)

    agent = CropLifecycleAgent()
    health = await agent.health_check()
    print(f"   Status: {health['status']}")

    request = CropStatusRequest(
        planted_date=date(2024, 3, 15),
        expected_harvest_date=date(2024, 12, 15),
        now=datetime(2024, 6, 15, tzinfo=timezone.utc),
        locale="en",
    )
    response = await agent.execute(request)
    print(f"   Status: {response.data.status.value} ({response.data.progress.progress_percentage}%)")
    print(f"   Message: {response.message}")
    return response.success


async def check_weather_agent() -> bool:
    """Weather agent; without an API key this exercises the demo fallback"""
    print("\nChecking weather advisory agent")
    print("=" * 50)

    agent = WeatherAdvisoryAgent()
    health = await agent.health_check()
    print(f"   Status: {health['status']}")

    response = await agent.execute(WeatherRequest(), use_cache=False)
    report = response.data
    print(f"   Success: {response.success}")
    print(f"   Message: {response.message}")
    print(f"   Forecast days: {len(report.forecast)}")
    for alert in report.alerts:
        print(f"   Alert: {alert.kind.value} ({alert.severity.value})")
    return True


async def check_api(base_url: str = "http://localhost:8000") -> None:
    """Hit a running server, if there is one"""
    print("\nChecking API endpoints")
    print("=" * 50)
    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=5) as client:
            response = await client.get("/api/health/")
            print(f"   /api/health/: {response.status_code}")
            response = await client.get(
                "/api/crops/status",
                params={"planted_date": "2024-03-15", "expected_harvest_date": "2024-12-15"},
            )
            print(f"   /api/crops/status: {response.status_code}")
    except httpx.HTTPError as e:
        print(f"   Server not reachable ({e}); start it with: python run.py")


async def main():
    setup_logging()
    settings = get_settings()
    print(f"Environment: {settings.environment.value}")
    print(f"Weather API key: {'set' if settings.openweather_api_key else 'not set (demo data)'}")

    ok = await check_crops_agent()
    ok = await check_weather_agent() and ok
    await check_api()

    if not ok:
        print("\nSome checks failed. See the logs above.")
        sys.exit(1)
    print("\nAll agent checks passed")


if __name__ == "__main__":
    asyncio.run(main())
