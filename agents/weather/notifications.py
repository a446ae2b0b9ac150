# agents/weather/notifications.py
"""
Alert notification helpers - severity filtering, de-duplication and staleness

Notification preferences are passed in explicitly; nothing here keeps global
state except the inbox object the caller owns.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from agents.crops.lifecycle import to_utc_datetime
from agents.weather.models import AlertSeverity, ForecastDay, WeatherAlert

STALE_FACTOR = 1.5


class NotificationSettings(BaseModel):
    enable_critical_alerts: bool = True
    severity_threshold: AlertSeverity = AlertSeverity.MEDIUM
    refresh_interval_minutes: int = Field(30, ge=1)

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "NotificationSettings":
        return cls(**(config or {}))


def filter_alerts(alerts: Iterable[WeatherAlert], settings: NotificationSettings) -> List[WeatherAlert]:
    """Alerts at or above the configured severity threshold"""
    if not settings.enable_critical_alerts:
        return []
    threshold = settings.severity_threshold.rank
    return [alert for alert in alerts if alert.severity.rank >= threshold]


class AlertInbox:
    """Unread alerts, de-duplicated by alert id"""

    def __init__(self):
        self._alerts: Dict[str, WeatherAlert] = {}

    def add(self, alerts: Iterable[WeatherAlert]) -> List[WeatherAlert]:
        """Add alerts and return the ones that were not already present"""
        added = []
        for alert in alerts:
            if alert.id in self._alerts:
                continue
            self._alerts[alert.id] = alert
            added.append(alert)
        return added

    def mark_read(self, alert_id: str) -> bool:
        return self._alerts.pop(alert_id, None) is not None

    def clear(self) -> None:
        self._alerts.clear()

    @property
    def alerts(self) -> List[WeatherAlert]:
        return list(self._alerts.values())

    @property
    def unread_count(self) -> int:
        return len(self._alerts)


def is_data_stale(
    last_update: Optional[datetime],
    refresh_interval_minutes: int,
    now: Optional[datetime] = None,
) -> bool:
    """Data is stale once older than 1.5 refresh intervals (naive times are UTC)"""
    if last_update is None:
        return True
    now = to_utc_datetime(now) if now is not None else datetime.now(timezone.utc)
    return now - to_utc_datetime(last_update) > timedelta(minutes=refresh_interval_minutes * STALE_FACTOR)


def daily_forecast_summary(day: ForecastDay) -> str:
    return (
        f"{day.date.isoformat()}: {day.description}. "
        f"Max: {round(day.max_temp_c)}°C, Min: {round(day.min_temp_c)}°C. "
        f"Rain: {day.precipitation_chance_pct}%"
    )
