# agents/weather/advisory.py
"""
Agronomic advisory engine - rule based assessment of weather for field work

Everything here is a pure function of the weather handed in: no network, no
clock (except as the default for an alert's start when none is given) and no
randomness. The agronomic formulas are field heuristics, not physical models:
soil temperature is air temperature minus a fixed offset and ET0 is a
simplified Penman-Monteith with constant psychrometric coefficients.
"""
import math
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from statistics import mean
from typing import Dict, List, Optional, Sequence

from agents.weather.models import (
    AgronomicAssessment, AlertKind, AlertSeverity, ConditionRating, ForecastDay,
    ForecastSample, IrrigationLevel, RiskLevel, WeatherAlert, WeatherReport,
    WeatherSnapshot
)

MS_TO_KMH = 3.6

# ---------- Agronomic constants ----------
SOIL_TEMP_OFFSET_C = 2.0
GDD_BASE_TEMP_C = 10.0
PSYCHROMETRIC_GAMMA = 0.665
U10_TO_U2 = 0.748  # 10 m -> 2 m wind speed conversion

HARVEST_LOOKAHEAD_DAYS = 3
HARVEST_RAIN_LIMIT_MM = 5.0
NOON_WINDOW_HOURS = (11, 13)

# ---------- Alert rules ----------
HEAT_ALERT_C = 35.0
HEAT_EXTREME_C = 40.0
FROST_ALERT_C = 5.0
FROST_EXTREME_C = 0.0
WIND_ALERT_KMH = 40.0
WIND_EXTREME_KMH = 60.0

ALERT_VALIDITY = {
    AlertKind.EXTREME_TEMPERATURE: timedelta(hours=8),
    AlertKind.FROST: timedelta(hours=12),
    AlertKind.WIND: timedelta(hours=6),
    AlertKind.RAIN: timedelta(hours=4),
}

ALERT_RECOMMENDATIONS: Dict[AlertKind, List[str]] = {
    AlertKind.EXTREME_TEMPERATURE: [
        "Avoid field work during the hottest hours",
        "Increase irrigation frequency",
        "Protect sensitive crops with shade netting",
    ],
    AlertKind.FROST: [
        "Protect frost-sensitive crops",
        "Consider heating systems in greenhouses",
        "Harvest mature produce before the frost",
    ],
    AlertKind.WIND: [
        "Secure temporary structures",
        "Avoid pesticide applications",
        "Stake tall crops",
    ],
    AlertKind.RAIN: [
        "Suspend field work if the rain is intense",
        "Check drainage in sensitive crops",
        "Protect equipment and machinery",
    ],
    AlertKind.DROUGHT: [
        "Increase irrigation frequency",
        "Apply mulch to conserve soil moisture",
        "Prioritize the most valuable crops",
    ],
    AlertKind.HAIL: [
        "Install anti-hail netting where possible",
        "Protect equipment and vehicles",
        "Review agricultural insurance",
    ],
}

ESCALATION_RECOMMENDATIONS = [
    "Consider temporarily evacuating field staff",
    "Activate emergency protocols",
]

# Provider event keywords, checked in order
EVENT_KEYWORDS = [
    (("rain", "storm"), AlertKind.RAIN),
    (("frost", "freeze"), AlertKind.FROST),
    (("drought",), AlertKind.DROUGHT),
    (("wind",), AlertKind.WIND),
    (("hail",), AlertKind.HAIL),
    (("heat", "cold"), AlertKind.EXTREME_TEMPERATURE),
]


# ---------- Derived metrics ----------

def soil_temperature(temperature_c: float) -> float:
    return round(temperature_c - SOIL_TEMP_OFFSET_C, 1)


def growing_degree_days(temperature_c: float) -> float:
    return max(0.0, temperature_c - GDD_BASE_TEMP_C)


def evapotranspiration(temperature_c: float, humidity_pct: float, wind_speed_kmh: float) -> float:
    """Simplified reference ET0 (mm/day), never negative, one decimal

    Split into a radiation term over the calm-air denominator and an
    aerodynamic term that carries all of the wind dependence, so ET0 never
    drops as wind rises, even in saturated air.
    """
    t = temperature_c
    if t + 237.3 <= 0 or t + 273.0 <= 0:
        return 0.0

    sat_vp = 0.6108 * math.exp(17.27 * t / (t + 237.3))
    delta = 4098.0 * sat_vp / (t + 237.3) ** 2
    u2 = max(0.0, wind_speed_kmh) / MS_TO_KMH * U10_TO_U2
    vapour_deficit = 0.01 * (100.0 - min(100.0, max(0.0, humidity_pct)))

    radiation = 0.408 * delta * t / (delta + PSYCHROMETRIC_GAMMA)
    aerodynamic = (
        PSYCHROMETRIC_GAMMA * 900.0 / (t + 273.0) * u2 * vapour_deficit
        / (delta + PSYCHROMETRIC_GAMMA * (1.0 + 0.34 * u2))
    )
    return round(max(0.0, radiation + aerodynamic), 1)


def irrigation_recommendation(temperature_c: float, humidity_pct: float, et0: float) -> IrrigationLevel:
    adjusted = et0
    if temperature_c > 35:
        adjusted += 1
    if temperature_c < 10:
        adjusted -= 1
    if humidity_pct < 30:
        adjusted += 0.5
    if humidity_pct > 90:
        adjusted -= 0.5

    if adjusted < 2:
        return IrrigationLevel.NONE
    if adjusted < 4:
        return IrrigationLevel.LIGHT
    if adjusted < 6:
        return IrrigationLevel.MODERATE
    return IrrigationLevel.HEAVY


def planting_conditions(temperature_c: float, humidity_pct: float, wind_speed_kmh: float) -> ConditionRating:
    score = 0

    if 15 <= temperature_c <= 25:
        score += 3
    elif 10 <= temperature_c <= 30:
        score += 2
    elif 5 <= temperature_c <= 35:
        score += 1

    if 60 <= humidity_pct <= 80:
        score += 2
    elif 50 <= humidity_pct <= 90:
        score += 1

    if wind_speed_kmh < 10:
        score += 1

    if score >= 5:
        return ConditionRating.EXCELLENT
    if score >= 4:
        return ConditionRating.GOOD
    if score >= 2:
        return ConditionRating.FAIR
    return ConditionRating.POOR


def harvest_conditions(current: WeatherSnapshot, forecast: Sequence[ForecastDay]) -> ConditionRating:
    """Rate the next few days for harvesting; no forecast rates as fair"""
    next_days = list(forecast[:HARVEST_LOOKAHEAD_DAYS])
    condition = (current.condition_text or "").lower()

    if "rain" in condition or any(day.precipitation_mm > HARVEST_RAIN_LIMIT_MM for day in next_days):
        return ConditionRating.POOR
    if current.temperature_c < 10 or current.temperature_c > 35 or current.humidity_pct > 85:
        return ConditionRating.FAIR
    if not next_days:
        return ConditionRating.FAIR
    if all(15 < day.max_temp_c < 35 and day.humidity_pct < 70 for day in next_days):
        return ConditionRating.EXCELLENT
    return ConditionRating.GOOD


def pest_risk(temperature_c: float, humidity_pct: float) -> RiskLevel:
    if temperature_c > 25 and humidity_pct > 70:
        return RiskLevel.HIGH
    if temperature_c > 20 and humidity_pct > 60:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def disease_risk(temperature_c: float, humidity_pct: float) -> RiskLevel:
    if humidity_pct > 85:
        return RiskLevel.HIGH
    if humidity_pct > 70 and temperature_c > 15:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def compute_assessment(current: WeatherSnapshot, forecast: Sequence[ForecastDay]) -> AgronomicAssessment:
    """Agronomic assessment of the current weather and the short range forecast"""
    temp = current.temperature_c
    humidity = current.humidity_pct
    et0 = evapotranspiration(temp, humidity, current.wind_speed_kmh)

    return AgronomicAssessment(
        soil_temperature_c=soil_temperature(temp),
        evapotranspiration_mm=et0,
        growing_degree_days=growing_degree_days(temp),
        irrigation_recommendation=irrigation_recommendation(temp, humidity, et0),
        planting_conditions=planting_conditions(temp, humidity, current.wind_speed_kmh),
        harvest_conditions=harvest_conditions(current, forecast),
        pest_risk=pest_risk(temp, humidity),
        disease_risk=disease_risk(temp, humidity),
    )


# ---------- Alerts ----------

def _make_alert(
    kind: AlertKind,
    severity: AlertSeverity,
    title: str,
    description: str,
    now: datetime,
) -> WeatherAlert:
    return WeatherAlert(
        id=f"{kind.value}-{now.isoformat()}",
        kind=kind,
        severity=severity,
        title=title,
        description=description,
        valid_from=now,
        valid_to=now + ALERT_VALIDITY[kind],
        recommendations=list(ALERT_RECOMMENDATIONS[kind]),
    )


def derive_alerts(current: WeatherSnapshot, now: Optional[datetime] = None) -> List[WeatherAlert]:
    """Threshold alerts for the current conditions; rules fire independently"""
    start = now or current.observed_at or datetime.now(timezone.utc)
    temp = current.temperature_c
    wind = current.wind_speed_kmh
    condition = (current.condition_text or "").lower()
    alerts: List[WeatherAlert] = []

    if temp > HEAT_ALERT_C:
        alerts.append(_make_alert(
            AlertKind.EXTREME_TEMPERATURE,
            AlertSeverity.EXTREME if temp > HEAT_EXTREME_C else AlertSeverity.HIGH,
            "Extreme heat warning",
            f"Very high temperature: {round(temp)}°C",
            start,
        ))

    if temp < FROST_ALERT_C:
        alerts.append(_make_alert(
            AlertKind.FROST,
            AlertSeverity.EXTREME if temp < FROST_EXTREME_C else AlertSeverity.HIGH,
            "Frost risk",
            f"Very low temperature: {round(temp)}°C",
            start,
        ))

    if wind > WIND_ALERT_KMH:
        alerts.append(_make_alert(
            AlertKind.WIND,
            AlertSeverity.EXTREME if wind > WIND_EXTREME_KMH else AlertSeverity.HIGH,
            "Strong winds",
            f"Wind speed: {round(wind)} km/h",
            start,
        ))

    if "rain" in condition or "storm" in condition:
        alerts.append(_make_alert(
            AlertKind.RAIN,
            AlertSeverity.HIGH if "heavy" in condition else AlertSeverity.MEDIUM,
            "Precipitation expected",
            f"Conditions: {current.description or current.condition_text}",
            start,
        ))

    return alerts


def categorize_alert_kind(event: str) -> AlertKind:
    event_lower = (event or "").lower()
    for keywords, kind in EVENT_KEYWORDS:
        if any(keyword in event_lower for keyword in keywords):
            return kind
    return AlertKind.RAIN


def categorize_alert_severity(tags: Optional[Sequence[str]]) -> AlertSeverity:
    if not tags:
        return AlertSeverity.MEDIUM
    joined = " ".join(tags).lower()
    if "extreme" in joined or "severe" in joined:
        return AlertSeverity.EXTREME
    if "moderate" in joined:
        return AlertSeverity.MEDIUM
    if "minor" in joined:
        return AlertSeverity.LOW
    return AlertSeverity.MEDIUM


def alert_from_provider(
    event: str,
    description: str,
    start: datetime,
    end: datetime,
    tags: Optional[Sequence[str]] = None,
    sender: Optional[str] = None,
) -> WeatherAlert:
    """Classify an official alert issued by the weather provider"""
    kind = categorize_alert_kind(event)
    severity = categorize_alert_severity(tags)

    recommendations = list(ALERT_RECOMMENDATIONS[kind])
    if severity in (AlertSeverity.HIGH, AlertSeverity.EXTREME):
        recommendations.extend(ESCALATION_RECOMMENDATIONS)

    return WeatherAlert(
        id=f"{sender or 'provider'}-{int(start.timestamp())}",
        kind=kind,
        severity=severity,
        title=event,
        description=description,
        valid_from=start,
        valid_to=end,
        recommendations=recommendations,
    )


# ---------- Forecast grouping ----------

def _noon_distance(sample: ForecastSample) -> float:
    ts = sample.timestamp
    return abs(ts.hour + ts.minute / 60.0 - 12.0)


def _representative_sample(samples: List[ForecastSample]) -> ForecastSample:
    low, high = NOON_WINDOW_HOURS
    around_noon = [s for s in samples if low <= s.timestamp.hour <= high]
    if not around_noon:
        return samples[0]
    return min(around_noon, key=_noon_distance)


def group_forecast_by_day(samples: Sequence[ForecastSample]) -> List[ForecastDay]:
    """Collapse sub-daily forecast steps into one entry per calendar date

    Dates come from each sample's own timestamp, so callers should shift
    timestamps into the location's local time first.
    """
    by_day: "OrderedDict[date, List[ForecastSample]]" = OrderedDict()
    for sample in sorted(samples, key=lambda s: s.timestamp):
        by_day.setdefault(sample.timestamp.date(), []).append(sample)

    days: List[ForecastDay] = []
    for day, day_samples in by_day.items():
        temps = [s.temperature_c for s in day_samples]
        noon = _representative_sample(day_samples)

        days.append(ForecastDay(
            date=day,
            max_temp_c=max(temps),
            min_temp_c=min(temps),
            humidity_pct=int(round(mean(s.humidity_pct for s in day_samples))),
            precipitation_mm=round(sum(s.precipitation_mm for s in day_samples), 2),
            precipitation_chance_pct=int(round(noon.precipitation_probability * 100)),
            wind_speed_kmh=round(mean(s.wind_speed_ms for s in day_samples) * MS_TO_KMH, 1),
            description=noon.description,
            icon=noon.icon,
        ))

    return days


def build_report(
    current: WeatherSnapshot,
    samples: Sequence[ForecastSample],
    forecast_days: int = 7,
    now: Optional[datetime] = None,
) -> WeatherReport:
    """Full advisory pipeline: group the forecast, assess, derive alerts"""
    forecast = group_forecast_by_day(samples)[:max(0, forecast_days)]
    return WeatherReport(
        current=current,
        forecast=forecast,
        alerts=derive_alerts(current, now),
        agricultural=compute_assessment(current, forecast),
    )
