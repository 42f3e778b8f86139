"""Data sources module."""

from disaster_info.data_sources.hazard_map_client import HazardMapClient, RetryState, hazard_map_client
from disaster_info.data_sources.weather_client import WeatherAlertClient, weather_alert_client

__all__ = [
    "HazardMapClient",
    "RetryState",
    "hazard_map_client",
    "WeatherAlertClient",
    "weather_alert_client",
]
