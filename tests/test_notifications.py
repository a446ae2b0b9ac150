from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from agents.weather import advisory
from agents.weather.models import AlertSeverity, ForecastDay, WeatherSnapshot
from agents.weather.notifications import (
	AlertInbox,
	NotificationSettings,
	daily_forecast_summary,
	filter_alerts,
	is_data_stale,
)

NOW = datetime(2024, 6, 15, 9, 0, tzinfo=timezone.utc)


def mixed_alerts():
	# frost (extreme), wind (high), rain (medium)
	current = WeatherSnapshot(temperature_c=-1.0, humidity_pct=80, wind_speed_kmh=50.0, condition_text="Rain")
	alerts = advisory.derive_alerts(current, NOW)
	provider = advisory.alert_from_provider("Frost Advisory", "", NOW, NOW + timedelta(hours=2), ["Minor"], "MARN")
	return alerts + [provider]


def severities(alerts):
	return sorted(alert.severity.rank for alert in alerts)


def test_default_settings() -> None:
	settings = NotificationSettings()

	assert settings.enable_critical_alerts is True
	assert settings.severity_threshold == AlertSeverity.MEDIUM
	assert settings.refresh_interval_minutes == 30


def test_settings_from_config() -> None:
	settings = NotificationSettings.from_config({"severity_threshold": "high", "refresh_interval_minutes": 10})

	assert settings.severity_threshold == AlertSeverity.HIGH
	assert settings.refresh_interval_minutes == 10
	assert NotificationSettings.from_config(None) == NotificationSettings()


def test_settings_reject_bad_values() -> None:
	with pytest.raises(ValidationError):
		NotificationSettings.from_config({"severity_threshold": "catastrophic"})
	with pytest.raises(ValidationError):
		NotificationSettings(refresh_interval_minutes=0)


@pytest.mark.parametrize(
	("threshold", "expected"),
	[
		(AlertSeverity.LOW, [1, 2, 3, 4]),
		(AlertSeverity.MEDIUM, [2, 3, 4]),
		(AlertSeverity.HIGH, [3, 4]),
		(AlertSeverity.EXTREME, [4]),
	],
)
def test_filter_by_threshold(threshold: AlertSeverity, expected: list[int]) -> None:
	settings = NotificationSettings(severity_threshold=threshold)
	assert severities(filter_alerts(mixed_alerts(), settings)) == expected


def test_filter_disabled() -> None:
	settings = NotificationSettings(enable_critical_alerts=False)
	assert filter_alerts(mixed_alerts(), settings) == []


def test_inbox_deduplicates_by_id() -> None:
	inbox = AlertInbox()
	alerts = mixed_alerts()

	first = inbox.add(alerts)
	second = inbox.add(alerts)

	assert len(first) == 4
	assert second == []
	assert inbox.unread_count == 4


def test_inbox_mark_read_and_clear() -> None:
	inbox = AlertInbox()
	alerts = mixed_alerts()
	inbox.add(alerts)

	assert inbox.mark_read(alerts[0].id) is True
	assert inbox.mark_read(alerts[0].id) is False
	assert inbox.unread_count == 3
	assert alerts[0] not in inbox.alerts

	inbox.clear()
	assert inbox.unread_count == 0
	assert inbox.alerts == []


def test_staleness() -> None:
	last = NOW - timedelta(minutes=45)

	assert is_data_stale(None, 30, NOW) is True
	assert is_data_stale(last, 30, NOW) is False
	assert is_data_stale(last - timedelta(minutes=1), 30, NOW) is True
	assert is_data_stale(NOW - timedelta(minutes=10), 5, NOW) is True


def test_staleness_accepts_naive_times() -> None:
	naive_now = NOW.replace(tzinfo=None)

	assert is_data_stale(naive_now - timedelta(minutes=20), 30, NOW) is False
	assert is_data_stale(naive_now - timedelta(minutes=60), 30, NOW) is True
	assert is_data_stale(NOW - timedelta(minutes=20), 30, naive_now) is False
	assert is_data_stale(naive_now - timedelta(hours=2), 30) is True


def test_daily_summary() -> None:
	day = ForecastDay(
		date=date(2024, 6, 16),
		max_temp_c=29.6,
		min_temp_c=21.2,
		humidity_pct=70,
		precipitation_mm=1.0,
		precipitation_chance_pct=40,
		wind_speed_kmh=10.0,
		description="light rain",
		icon="10d",
	)

	assert daily_forecast_summary(day) == "2024-06-16: light rain. Max: 30°C, Min: 21°C. Rain: 40%"
