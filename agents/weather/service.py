# agents/weather/service.py
"""
Weather service - OpenWeatherMap client feeding the advisory engine
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import requests

from agents.weather import advisory
from agents.weather.models import (
    ForecastDay, ForecastSample, WeatherAlert, WeatherLocation, WeatherReport,
    WeatherSnapshot
)
from core.exceptions import AgentConfigError, ExternalAPIError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


class WeatherService:
    """Service for fetching weather data and turning it into agronomic reports"""

    def __init__(self, config: Dict[str, Any], api_key: Optional[str] = None):
        self.config = config
        self.api_key = api_key
        self.timeout = config.get("request_timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        self.units = config.get("units", "metric")
        self.forecast_days = config.get("forecast_days", 7)
        self.current_url = config.get("current_url", "https://api.openweathermap.org/data/2.5/weather")
        self.forecast_url = config.get("forecast_url", "https://api.openweathermap.org/data/2.5/forecast")
        self.geocoding_url = config.get("geocoding_url", "https://api.openweathermap.org/geo/1.0/direct")

    # ---------- HTTP ----------

    def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        if not self.api_key:
            raise AgentConfigError("OPENWEATHER_API_KEY is not configured")

        try:
            resp = requests.get(url, params={**params, "appid": self.api_key}, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            logger.error(f"Weather request to {url} failed: {e}")
            raise ExternalAPIError(f"Weather data fetch failed: {e}") from e
        except ValueError as e:
            raise ExternalAPIError(f"Weather API returned invalid JSON: {e}") from e

        # OpenWeatherMap reports errors in the body with a non-200 "cod"
        if isinstance(payload, dict) and str(payload.get("cod", "200")) not in ("200", "0"):
            message = payload.get("message", "OpenWeatherMap error")
            logger.error(f"OpenWeatherMap API error: {message}")
            raise ExternalAPIError(message)

        return payload

    def get_location_coordinates(self, city_name: str, limit: int = 5) -> List[WeatherLocation]:
        """Resolve a city name to candidate coordinates"""
        payload = self._get_json(self.geocoding_url, {"q": city_name, "limit": limit})
        if not isinstance(payload, list):
            raise ExternalAPIError("Unexpected geocoding payload")

        return [
            WeatherLocation(
                lat=loc["lat"],
                lon=loc["lon"],
                name=loc.get("name", city_name),
                country=loc.get("country", ""),
                state=loc.get("state"),
            )
            for loc in payload
        ]

    def fetch_current(self, lat: float, lon: float) -> Dict[str, Any]:
        return self._get_json(self.current_url, {"lat": lat, "lon": lon, "units": self.units})

    def fetch_forecast(self, lat: float, lon: float) -> Dict[str, Any]:
        return self._get_json(self.forecast_url, {"lat": lat, "lon": lon, "units": self.units})

    # ---------- Parsing ----------

    @staticmethod
    def _local_tz(offset_seconds: Optional[int]) -> timezone:
        return timezone(timedelta(seconds=offset_seconds or 0))

    def parse_current(self, payload: Dict[str, Any]) -> WeatherSnapshot:
        """Convert a current-weather payload (metric units) into a snapshot"""
        try:
            main = payload["main"]
            wind = payload.get("wind") or {}
            conditions = (payload.get("weather") or [{}])[0]
            country = (payload.get("sys") or {}).get("country")
            name = payload.get("name")

            observed_at = None
            if payload.get("dt") is not None:
                observed_at = datetime.fromtimestamp(payload["dt"], tz=self._local_tz(payload.get("timezone")))

            return WeatherSnapshot(
                temperature_c=float(main["temp"]),
                humidity_pct=int(main["humidity"]),
                wind_speed_kmh=round(float(wind.get("speed", 0.0)) * advisory.MS_TO_KMH, 1),
                cloud_cover_pct=int((payload.get("clouds") or {}).get("all", 0)),
                condition_text=conditions.get("main", ""),
                location=f"{name}, {country}" if name and country else name,
                description=conditions.get("description"),
                icon=conditions.get("icon"),
                wind_direction_deg=wind.get("deg", 0),
                pressure_hpa=main.get("pressure"),
                visibility_km=(payload.get("visibility") or 10000) / 1000,
                observed_at=observed_at,
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ExternalAPIError(f"Malformed current weather payload: {e}") from e

    def parse_forecast(self, payload: Dict[str, Any]) -> List[ForecastSample]:
        """Convert a 3-hour forecast payload into samples in the city's local time"""
        try:
            tz = self._local_tz((payload.get("city") or {}).get("timezone"))
            samples = []
            for item in payload.get("list") or []:
                conditions = (item.get("weather") or [{}])[0]
                rain = (item.get("rain") or {}).get("3h", 0.0)
                snow = (item.get("snow") or {}).get("3h", 0.0)
                samples.append(ForecastSample(
                    timestamp=datetime.fromtimestamp(item["dt"], tz=tz),
                    temperature_c=float(item["main"]["temp"]),
                    humidity_pct=float(item["main"]["humidity"]),
                    wind_speed_ms=float((item.get("wind") or {}).get("speed", 0.0)),
                    precipitation_mm=float(rain) + float(snow),
                    precipitation_probability=float(item.get("pop", 0.0)),
                    description=conditions.get("description", ""),
                    icon=conditions.get("icon", ""),
                ))
            return samples
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ExternalAPIError(f"Malformed forecast payload: {e}") from e

    def parse_provider_alerts(self, payload: Dict[str, Any]) -> List[WeatherAlert]:
        """Official alerts, present only on plans that publish them"""
        alerts = []
        for raw in payload.get("alerts") or []:
            try:
                alerts.append(advisory.alert_from_provider(
                    event=raw.get("event", ""),
                    description=raw.get("description", ""),
                    start=datetime.fromtimestamp(raw["start"], tz=timezone.utc),
                    end=datetime.fromtimestamp(raw["end"], tz=timezone.utc),
                    tags=raw.get("tags"),
                    sender=raw.get("sender_name"),
                ))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed provider alert: {e}")
        return alerts

    # ---------- Reports ----------

    def get_weather_report(self, lat: float, lon: float, now: Optional[datetime] = None) -> WeatherReport:
        """Fetch current weather and forecast and build the agronomic report"""
        current_payload = self.fetch_current(lat, lon)
        forecast_payload = self.fetch_forecast(lat, lon)
        logger.info(f"Weather data fetched successfully for lat={lat}, lon={lon}")

        current = self.parse_current(current_payload)
        samples = self.parse_forecast(forecast_payload)

        report = advisory.build_report(current, samples, forecast_days=self.forecast_days, now=now)
        report.alerts.extend(self.parse_provider_alerts(current_payload))
        return report

    def get_weather_by_city(self, city_name: str, now: Optional[datetime] = None) -> WeatherReport:
        locations = self.get_location_coordinates(city_name)
        if not locations:
            raise ExternalAPIError(f"Location not found: {city_name}")
        location = locations[0]
        return self.get_weather_report(location.lat, location.lon, now=now)

    def mock_report(self, now: Optional[datetime] = None) -> WeatherReport:
        """Demo dataset used when the provider is unavailable"""
        now = now or datetime.now(timezone.utc)
        today = now.date()

        current = WeatherSnapshot(
            temperature_c=28.0,
            humidity_pct=65,
            wind_speed_kmh=12.0,
            cloud_cover_pct=30,
            condition_text="Clouds",
            location=self.config.get("default_location", "San Salvador, El Salvador"),
            description="partly cloudy",
            icon="02d",
            wind_direction_deg=180,
            pressure_hpa=1013,
            visibility_km=10,
            observed_at=now,
        )
        forecast = [
            ForecastDay(
                date=today + timedelta(days=1),
                max_temp_c=30, min_temp_c=22, humidity_pct=70,
                precipitation_mm=0.2, precipitation_chance_pct=20, wind_speed_kmh=15,
                description="light rain", icon="10d",
            ),
            ForecastDay(
                date=today + timedelta(days=2),
                max_temp_c=32, min_temp_c=24, humidity_pct=60,
                precipitation_mm=0.0, precipitation_chance_pct=5, wind_speed_kmh=10,
                description="clear sky", icon="01d",
            ),
        ]

        return WeatherReport(
            current=current,
            forecast=forecast,
            alerts=advisory.derive_alerts(current, now),
            agricultural=advisory.compute_assessment(current, forecast),
        )
