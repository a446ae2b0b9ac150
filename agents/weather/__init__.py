"""
Weather advisory agent package
"""

from .agent import WeatherAdvisoryAgent
from .models import WeatherRequest, WeatherResponse

__all__ = ["WeatherAdvisoryAgent", "WeatherRequest", "WeatherResponse"]
