"""Weather alert provider.

No alert feed is wired in yet; every lookup returns an empty list.
"""

from loguru import logger

from disaster_info.core.models import Coordinates


class WeatherAlertClient:

    async def get_alerts(self, coordinates: Coordinates) -> list:
        logger.debug(f"Weather alerts not available for ({coordinates.latitude}, {coordinates.longitude})")
        return []


weather_alert_client = WeatherAlertClient()
