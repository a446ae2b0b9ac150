# core/config.py
"""
Configuration management for the agronomy backend
"""

import logging
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True

    # API Configuration
    api_title: str = "Campo360 Agronomy Backend"
    api_version: str = "1.0.0"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:4173"
    ]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # External API Keys
    openweather_api_key: Optional[str] = None

    # Cache Configuration
    cache_enabled: bool = True
    cache_default_ttl: int = 900  # 15 minutes

    # Agent Configurations
    crops_config: Dict[str, Any] = {
        "default_locale": "es",
    }

    weather_config: Dict[str, Any] = {
        "default_location": "San Salvador, El Salvador",
        "default_lat": 13.6929,
        "default_lon": -89.2182,
        "forecast_days": 7,
        "cache_minutes": 30,
        "request_timeout_seconds": 10,
        "units": "metric",
        "current_url": "https://api.openweathermap.org/data/2.5/weather",
        "forecast_url": "https://api.openweathermap.org/data/2.5/forecast",
        "geocoding_url": "https://api.openweathermap.org/geo/1.0/direct",
    }

    notification_config: Dict[str, Any] = {
        "enable_critical_alerts": True,
        "severity_threshold": "medium",
        "refresh_interval_minutes": 30,
    }

    def get_agent_config(self, agent_name: str) -> Dict[str, Any]:
        """Get configuration for specific agent"""
        config_map = {
            "crops": self.crops_config,
            "weather": {**self.weather_config, "notifications": self.notification_config},
        }
        return config_map.get(agent_name, {})

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def validate_api_keys(settings: Settings) -> None:
    """Validate required API keys based on environment"""
    missing = []
    if not settings.openweather_api_key:
        missing.append("OPENWEATHER_API_KEY")

    if not missing:
        logger.info("All required API keys are present")
        return

    if settings.is_production:
        raise ValueError(f"Missing required API keys in production: {', '.join(missing)}")

    logger.warning(f"Missing API keys ({settings.environment.value} mode): {', '.join(missing)}")
    logger.warning("Weather requests will be answered with fallback demo data")
