# agents/weather/agent.py
"""
Weather advisory agent - weather data with agronomic assessment and alerts
"""

import asyncio
from datetime import datetime
from typing import List, Type

from agents.base import BaseAgent
from agents.weather import advisory
from agents.weather.models import (
    AssessmentRequest, AssessmentResult, WeatherLocation, WeatherReport,
    WeatherRequest, WeatherResponse
)
from agents.weather.notifications import NotificationSettings, filter_alerts
from agents.weather.service import WeatherService


class WeatherAdvisoryAgent(BaseAgent[WeatherRequest, WeatherResponse]):
    """
    Weather advisory agent

    Features:
    - Current weather and 3-hour forecast from OpenWeatherMap
    - Daily forecast aggregation
    - Irrigation, planting and harvest suitability
    - Pest and disease risk
    - Heat, frost, wind and rain alerts
    - Demo data when the provider is unavailable
    """

    def __init__(self):
        super().__init__("weather")
        self.service = WeatherService(config=self.config, api_key=self.settings.openweather_api_key)
        self.notification_settings = NotificationSettings.from_config(self.config.get("notifications"))

    def _validate_config(self) -> None:
        """Validate weather agent configuration"""
        forecast_days = self.config.get("forecast_days", 7)
        if not isinstance(forecast_days, int) or not 1 <= forecast_days <= 16:
            raise ValueError(f"forecast_days must be an integer between 1 and 16, got {forecast_days!r}")

        NotificationSettings.from_config(self.config.get("notifications"))

        if not self.settings.openweather_api_key:
            self.logger.warning("OPENWEATHER_API_KEY not found - weather requests will use demo data")

    def _get_response_class(self) -> Type[WeatherResponse]:
        return WeatherResponse

    async def process_request(self, request: WeatherRequest) -> WeatherResponse:
        """Process weather advisory request"""
        loop = asyncio.get_running_loop()

        if request.city:
            self.logger.info(f"Processing weather request for city {request.city}")
            report = await loop.run_in_executor(None, self.service.get_weather_by_city, request.city)
            location = request.city
        else:
            lat = request.lat if request.lat is not None else self.config.get("default_lat")
            lon = request.lon if request.lon is not None else self.config.get("default_lon")
            self.logger.info(f"Processing weather request for ({lat}, {lon})")
            report = await loop.run_in_executor(None, self.service.get_weather_report, lat, lon)
            location = f"({lat:.3f}, {lon:.3f})"

        notify = filter_alerts(report.alerts, self.notification_settings)

        self.logger.info(
            f"Weather report ready: irrigation={report.agricultural.irrigation_recommendation.value}, "
            f"alerts={len(report.alerts)}"
        )

        return WeatherResponse(
            success=True,
            data=report,
            message=self._generate_response_message(report),
            timestamp=datetime.now().isoformat(),
            metadata={
                "location": report.current.location or location,
                "forecast_days": len(report.forecast),
                "notify_alert_ids": [alert.id for alert in notify],
                "source": "openweathermap",
            }
        )

    def _generate_response_message(self, report: WeatherReport) -> str:
        agri = report.agricultural
        message = (
            f"Irrigation: {agri.irrigation_recommendation.value}, "
            f"planting: {agri.planting_conditions.value}, "
            f"harvest: {agri.harvest_conditions.value}"
        )
        if report.alerts:
            message += f". {len(report.alerts)} active alert(s)"
        return message

    def assess(self, request: AssessmentRequest) -> AssessmentResult:
        """Run the advisory engine over caller supplied weather"""
        return AssessmentResult(
            agricultural=advisory.compute_assessment(request.current, request.forecast),
            alerts=advisory.derive_alerts(request.current, request.now),
        )

    async def search_locations(self, city: str) -> List[WeatherLocation]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.service.get_location_coordinates, city)

    def get_fallback_response(self, request: WeatherRequest, error: Exception) -> WeatherResponse:
        """Get fallback response when the weather provider fails"""
        report = self.service.mock_report()

        return WeatherResponse(
            success=False,
            data=report,
            message=f"Using demo weather data due to error: {str(error)}",
            timestamp=datetime.now().isoformat(),
            metadata={"fallback": True, "error": str(error)}
        )
