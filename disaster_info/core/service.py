"""Disaster info lookup: fans out to every source for one point."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from disaster_info.core.classifier import HazardClassifier, hazard_classifier
from disaster_info.core.errors import DisasterInfoError, ExternalApiError
from disaster_info.core.history import HistorySynthesizer, history_synthesizer
from disaster_info.core.models import Coordinates, DisasterInfo
from disaster_info.core.shelters import ShelterSynthesizer, shelter_synthesizer
from disaster_info.data_sources.hazard_map_client import HazardMapClient, hazard_map_client
from disaster_info.data_sources.weather_client import WeatherAlertClient, weather_alert_client
from disaster_info.utils.constants import (
    HAZARD_API_NAME,
    HISTORY_API_NAME,
    OVERLOADED_MESSAGE,
    SHELTER_API_NAME,
    TIMEOUT_MESSAGE,
    WEATHER_API_NAME,
)


class DisasterInfoService:
    """Hazard classification plus synthetic shelters and history for a point."""

    def __init__(
        self,
        client: Optional[HazardMapClient] = None,
        classifier: Optional[HazardClassifier] = None,
        shelters: Optional[ShelterSynthesizer] = None,
        history: Optional[HistorySynthesizer] = None,
        weather: Optional[WeatherAlertClient] = None,
    ):
        self.client = client or hazard_map_client
        self.classifier = classifier or hazard_classifier
        self.shelters = shelters or shelter_synthesizer
        self.history = history or history_synthesizer
        self.weather = weather or weather_alert_client

    async def get_disaster_info(self, coordinates: Coordinates) -> DisasterInfo:
        """Run all four branches concurrently; the first failure fails the lookup."""
        start = datetime.now(timezone.utc)
        logger.info(f"Disaster info lookup: ({coordinates.latitude}, {coordinates.longitude})")

        hazards, shelters, history, alerts = await asyncio.gather(
            self.get_hazard_map_info(coordinates),
            self.get_evacuation_shelters(coordinates),
            self.get_disaster_history(coordinates),
            self.get_weather_alerts(coordinates),
        )

        duration = (datetime.now(timezone.utc) - start).total_seconds()
        logger.info(
            f"Lookup done: {len(hazards)} hazards, {len(shelters)} shelters, "
            f"{len(history)} events, {duration:.2f}s"
        )

        return DisasterInfo(
            coordinates=coordinates,
            hazard_info=hazards,
            shelters=shelters,
            disaster_history=history,
            weather_alerts=alerts,
            last_updated=datetime.now(timezone.utc),
        )

    async def get_hazard_map_info(self, coordinates: Coordinates) -> list:
        try:
            payload = await self.client.fetch_hazard_payload(coordinates)
            return self.classifier.classify(payload)
        except ExternalApiError as e:
            if e.is_timeout:
                raise ExternalApiError(TIMEOUT_MESSAGE, e.status_code, e.api_name) from e
            if e.status_code == 504:
                raise ExternalApiError(OVERLOADED_MESSAGE, e.status_code, e.api_name) from e
            raise
        except DisasterInfoError:
            raise
        except Exception as e:
            raise ExternalApiError(
                f"Failed to fetch hazard map info: {e}", api_name=HAZARD_API_NAME
            ) from e

    async def get_evacuation_shelters(self, coordinates: Coordinates) -> list:
        try:
            return self.shelters.synthesize(coordinates)
        except DisasterInfoError:
            raise
        except Exception as e:
            raise ExternalApiError(
                f"Failed to fetch evacuation shelters: {e}", api_name=SHELTER_API_NAME
            ) from e

    async def get_disaster_history(self, coordinates: Coordinates) -> list:
        try:
            return self.history.synthesize(coordinates)
        except DisasterInfoError:
            raise
        except Exception as e:
            raise ExternalApiError(
                f"Failed to fetch disaster history: {e}", api_name=HISTORY_API_NAME
            ) from e

    async def get_weather_alerts(self, coordinates: Coordinates) -> list:
        try:
            return await self.weather.get_alerts(coordinates)
        except DisasterInfoError:
            raise
        except Exception as e:
            raise ExternalApiError(
                f"Failed to fetch weather alerts: {e}", api_name=WEATHER_API_NAME
            ) from e
