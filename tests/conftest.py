"""Shared pytest fixtures: agents, ASGI test client and OpenWeatherMap payloads."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
import requests
from httpx import ASGITransport, AsyncClient

# Tests never talk to the real provider
os.environ.pop("OPENWEATHER_API_KEY", None)
os.environ["ENVIRONMENT"] = "testing"

from core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from agents.base import agent_registry  # noqa: E402
from agents.crops.agent import CropLifecycleAgent  # noqa: E402
from agents.weather.agent import WeatherAdvisoryAgent  # noqa: E402
from agents.weather.service import WeatherService  # noqa: E402
from api.app import create_app  # noqa: E402

LOCAL_TZ = timezone(timedelta(hours=-6))
LOCAL_OFFSET_SECONDS = -21600


class FakeResponse:
	def __init__(self, payload: Any, status_code: int = 200) -> None:
		self._payload = payload
		self.status_code = status_code

	def raise_for_status(self) -> None:
		if self.status_code >= 400:
			raise requests.HTTPError(f"{self.status_code} Client Error")

	def json(self) -> Any:
		return self._payload


class FakeOpenWeather:
	"""Routes requests.get calls to canned payloads by URL."""

	def __init__(self, routes: dict[str, Any]) -> None:
		self.routes = routes
		self.calls: list[tuple[str, dict[str, Any]]] = []

	def __call__(self, url: str, params: dict[str, Any] | None = None, timeout: float | None = None) -> FakeResponse:
		self.calls.append((url, dict(params or {})))
		route = self.routes[url]
		if isinstance(route, Exception):
			raise route
		if isinstance(route, FakeResponse):
			return route
		return FakeResponse(route)


@pytest.fixture
def current_payload() -> dict[str, Any]:
	observed = datetime(2024, 6, 15, 12, 0, tzinfo=LOCAL_TZ)
	return {
		"weather": [{"main": "Clear", "description": "clear sky", "icon": "01d"}],
		"main": {"temp": 22.4, "humidity": 55, "pressure": 1012},
		"visibility": 8000,
		"wind": {"speed": 2.5, "deg": 90},
		"clouds": {"all": 10},
		"dt": int(observed.timestamp()),
		"sys": {"country": "SV"},
		"timezone": LOCAL_OFFSET_SECONDS,
		"name": "San Salvador",
		"cod": 200,
	}


@pytest.fixture
def forecast_payload() -> dict[str, Any]:
	start = datetime(2024, 6, 16, 0, 0, tzinfo=LOCAL_TZ)
	items = []
	for step in range(40):
		moment = start + timedelta(hours=3 * step)
		items.append({
			"dt": int(moment.timestamp()),
			"main": {"temp": 20.0 + (moment.hour % 12) / 2, "humidity": 50},
			"wind": {"speed": 3.0},
			"pop": 0.1,
			"weather": [{"description": "clear sky", "icon": "01d"}],
		})
	return {
		"cod": "200",
		"list": items,
		"city": {"name": "San Salvador", "country": "SV", "timezone": LOCAL_OFFSET_SECONDS},
	}


@pytest.fixture
def geocoding_payload() -> list[dict[str, Any]]:
	return [
		{"name": "San Salvador", "lat": 13.6929, "lon": -89.2182, "country": "SV"},
		{"name": "San Salvador de Jujuy", "lat": -24.1858, "lon": -65.2995, "country": "AR", "state": "Jujuy"},
	]


@pytest.fixture
def fake_openweather(
	monkeypatch: pytest.MonkeyPatch,
	current_payload: dict[str, Any],
	forecast_payload: dict[str, Any],
	geocoding_payload: list[dict[str, Any]],
) -> Callable[..., FakeOpenWeather]:
	"""Install a fake requests.get; keyword overrides replace single routes."""

	def install(**overrides: Any) -> FakeOpenWeather:
		service = WeatherService({})
		routes = {
			service.current_url: current_payload,
			service.forecast_url: forecast_payload,
			service.geocoding_url: geocoding_payload,
		}
		names = {"current": service.current_url, "forecast": service.forecast_url, "geocoding": service.geocoding_url}
		for name, value in overrides.items():
			routes[names[name]] = value
		fake = FakeOpenWeather(routes)
		monkeypatch.setattr("agents.weather.service.requests.get", fake)
		return fake

	return install


@pytest.fixture
def crops_agent() -> CropLifecycleAgent:
	return CropLifecycleAgent()


@pytest.fixture
def weather_agent() -> WeatherAdvisoryAgent:
	return WeatherAdvisoryAgent()


@pytest_asyncio.fixture
async def client(
	crops_agent: CropLifecycleAgent,
	weather_agent: WeatherAdvisoryAgent,
) -> AsyncGenerator[AsyncClient, None]:
	agent_registry.register(crops_agent)
	agent_registry.register(weather_agent)

	app = create_app()
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
		yield async_client

	agent_registry.unregister(crops_agent.agent_name)
	agent_registry.unregister(weather_agent.agent_name)


@pytest.fixture
def fake_response() -> type[FakeResponse]:
	return FakeResponse
