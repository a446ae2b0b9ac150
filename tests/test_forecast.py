from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from agents.weather import advisory
from agents.weather.models import ForecastSample, WeatherSnapshot

LOCAL_TZ = timezone(timedelta(hours=-6))


def sample(
	day: int,
	hour: int,
	temp: float = 20.0,
	humidity: float = 50.0,
	wind: float = 2.0,
	precipitation: float = 0.0,
	pop: float = 0.0,
	description: str = "clear sky",
	icon: str = "01d",
) -> ForecastSample:
	return ForecastSample(
		timestamp=datetime(2024, 6, day, hour, 0, tzinfo=LOCAL_TZ),
		temperature_c=temp,
		humidity_pct=humidity,
		wind_speed_ms=wind,
		precipitation_mm=precipitation,
		precipitation_probability=pop,
		description=description,
		icon=icon,
	)


def first_day_samples() -> list[ForecastSample]:
	return [
		sample(16, 6, temp=20.0, humidity=80, wind=2.0, precipitation=0.0, pop=0.1, description="mist"),
		sample(16, 9, temp=24.0, humidity=70, wind=3.0, precipitation=1.5, pop=0.6, description="light rain"),
		sample(16, 12, temp=28.0, humidity=60, wind=4.0, precipitation=0.5, pop=0.35, description="scattered clouds", icon="03d"),
		sample(16, 15, temp=26.0, humidity=50, wind=3.0, precipitation=0.0, pop=0.2, description="few clouds"),
	]


def test_daily_aggregates() -> None:
	days = advisory.group_forecast_by_day(first_day_samples())

	assert len(days) == 1
	day = days[0]
	assert day.date == date(2024, 6, 16)
	assert day.max_temp_c == 28.0
	assert day.min_temp_c == 20.0
	assert day.humidity_pct == 65
	assert day.precipitation_mm == pytest.approx(2.0)
	assert day.wind_speed_kmh == pytest.approx(10.8)


def test_noon_sample_supplies_chance_and_description() -> None:
	day = advisory.group_forecast_by_day(first_day_samples())[0]

	assert day.precipitation_chance_pct == 35
	assert day.description == "scattered clouds"
	assert day.icon == "03d"


def test_day_without_noon_sample_uses_first_step() -> None:
	samples = [
		sample(17, 3, pop=0.8, description="moderate rain", icon="10n"),
		sample(17, 21, pop=0.1, description="clear sky", icon="01n"),
	]

	day = advisory.group_forecast_by_day(samples)[0]

	assert day.precipitation_chance_pct == 80
	assert day.description == "moderate rain"


def test_twelve_preferred_over_eleven() -> None:
	samples = [
		sample(18, 11, description="eleven"),
		sample(18, 12, description="noon"),
		sample(18, 13, description="one"),
	]
	assert advisory.group_forecast_by_day(samples)[0].description == "noon"


def test_days_follow_local_calendar() -> None:
	# 23:00 at UTC-6 is already the next day in UTC
	late = sample(15, 23, temp=19.0)
	early = sample(16, 0, temp=18.0)

	days = advisory.group_forecast_by_day([early, late])

	assert [day.date for day in days] == [date(2024, 6, 15), date(2024, 6, 16)]


def test_output_is_chronological_regardless_of_input_order() -> None:
	samples = [sample(day, hour) for day in (16, 17, 18, 19) for hour in (0, 6, 12, 18)]
	shuffled = list(samples)
	random.Random(7).shuffle(shuffled)

	days = advisory.group_forecast_by_day(shuffled)

	assert [day.date for day in days] == [date(2024, 6, d) for d in (16, 17, 18, 19)]
	assert days == advisory.group_forecast_by_day(samples)


def test_empty_forecast() -> None:
	assert advisory.group_forecast_by_day([]) == []


def test_report_truncates_to_requested_days() -> None:
	current = WeatherSnapshot(temperature_c=22.0, humidity_pct=55, wind_speed_kmh=5.0, condition_text="Clear")
	samples = [sample(d, 12) for d in range(10, 18)]

	report = advisory.build_report(current, samples, forecast_days=7)
	short = advisory.build_report(current, samples, forecast_days=3)

	assert len(report.forecast) == 7
	assert report.forecast[0].date == date(2024, 6, 10)
	assert report.forecast[-1].date == date(2024, 6, 16)
	assert len(short.forecast) == 3
	assert report.agricultural == advisory.compute_assessment(current, report.forecast)
	assert report.alerts == []
