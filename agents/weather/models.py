# agents/weather/models.py
"""
Pydantic models for weather advisory agent
"""
from datetime import date as dt_date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IrrigationLevel(str, Enum):
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


class ConditionRating(str, Enum):
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertKind(str, Enum):
    RAIN = "rain"
    FROST = "frost"
    WIND = "wind"
    DROUGHT = "drought"
    HAIL = "hail"
    EXTREME_TEMPERATURE = "extreme_temperature"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    AlertSeverity.LOW: 1,
    AlertSeverity.MEDIUM: 2,
    AlertSeverity.HIGH: 3,
    AlertSeverity.EXTREME: 4,
}


class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    temperature_c: float
    humidity_pct: int = Field(..., ge=0, le=100)
    wind_speed_kmh: float = Field(0.0, ge=0)
    cloud_cover_pct: int = Field(0, ge=0, le=100)
    condition_text: str = ""
    location: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    wind_direction_deg: Optional[float] = None
    pressure_hpa: Optional[float] = None
    visibility_km: Optional[float] = None
    observed_at: Optional[datetime] = None


class ForecastSample(BaseModel):
    """One sub-daily forecast step (3 hours for OpenWeatherMap)"""
    model_config = ConfigDict(allow_inf_nan=False)

    timestamp: datetime
    temperature_c: float
    humidity_pct: float = Field(..., ge=0, le=100)
    wind_speed_ms: float = Field(0.0, ge=0)
    precipitation_mm: float = Field(0.0, ge=0)
    precipitation_probability: float = Field(0.0, ge=0, le=1)
    description: str = ""
    icon: str = ""


class ForecastDay(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    date: dt_date
    max_temp_c: float
    min_temp_c: float
    humidity_pct: int = Field(..., ge=0, le=100)
    precipitation_mm: float = Field(0.0, ge=0)
    precipitation_chance_pct: int = Field(0, ge=0, le=100)
    wind_speed_kmh: float = Field(0.0, ge=0)
    description: str = ""
    icon: str = ""


class AgronomicAssessment(BaseModel):
    soil_temperature_c: float
    evapotranspiration_mm: float = Field(..., ge=0)
    growing_degree_days: float = Field(..., ge=0)
    irrigation_recommendation: IrrigationLevel
    planting_conditions: ConditionRating
    harvest_conditions: ConditionRating
    pest_risk: RiskLevel
    disease_risk: RiskLevel


class WeatherAlert(BaseModel):
    id: str
    kind: AlertKind
    severity: AlertSeverity
    title: str
    description: str
    valid_from: datetime
    valid_to: datetime
    recommendations: List[str]


class WeatherLocation(BaseModel):
    lat: float
    lon: float
    name: str
    country: str
    state: Optional[str] = None


class WeatherReport(BaseModel):
    current: WeatherSnapshot
    forecast: List[ForecastDay]
    alerts: List[WeatherAlert]
    agricultural: AgronomicAssessment


class WeatherRequest(BaseModel):
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Latitude of the location")
    lon: Optional[float] = Field(None, ge=-180, le=180, description="Longitude of the location")
    city: Optional[str] = Field(None, description="City name, resolved with the geocoding API")

    @model_validator(mode="after")
    def _validate_location(self) -> "WeatherRequest":
        if (self.lat is None) != (self.lon is None):
            raise ValueError("lat and lon must be provided together")
        return self


class AssessmentRequest(BaseModel):
    current: WeatherSnapshot
    forecast: List[ForecastDay] = Field(default_factory=list)
    now: Optional[datetime] = None


class AssessmentResult(BaseModel):
    agricultural: AgronomicAssessment
    alerts: List[WeatherAlert]


class WeatherResponse(BaseModel):
    success: bool
    data: WeatherReport
    message: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = None
