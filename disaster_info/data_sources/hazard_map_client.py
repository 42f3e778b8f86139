"""Hazard map API client with bounded retries."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx
from loguru import logger

from disaster_info.core.errors import ExternalApiError
from disaster_info.core.models import Coordinates
from disaster_info.utils.config import HazardMapConfig, settings
from disaster_info.utils.constants import (
    HAZARD_API_NAME,
    HAZARD_PARSER_API_NAME,
    RETRYABLE_STATUS_CODES,
)


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in RETRYABLE_STATUS_CODES


@dataclass
class RetryState:
    """Attempt bookkeeping for one fetch."""
    max_attempts: int
    attempt: int = 0
    last_error: Optional[ExternalApiError] = None
    retryable: bool = False

    def begin(self) -> int:
        self.attempt += 1
        self.last_error = None
        self.retryable = False
        return self.attempt

    def record(self, error: ExternalApiError, retryable: bool) -> None:
        self.last_error = error
        self.retryable = retryable

    def should_retry(self) -> bool:
        return self.retryable and self.attempt < self.max_attempts


class HazardMapClient:
    """Client for the hazard map lookup API (point query, WGS84)."""

    def __init__(
        self,
        config: Optional[HazardMapConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        config = config or settings.hazard_map
        self.base_url = config.base_url
        self.datum = config.datum
        self.timeout = config.timeout_seconds
        self.max_attempts = config.retry_attempts
        self.retry_delay = config.retry_delay_seconds
        self.transport = transport
        self.sleep = sleep

        self.headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if config.api_key:
            self.headers["Authorization"] = f"Bearer {config.api_key}"

    def build_url(self, coordinates: Coordinates) -> httpx.URL:
        return httpx.URL(self.base_url, params={
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "datum": self.datum,
        })

    async def fetch_hazard_payload(self, coordinates: Coordinates) -> dict:
        """GET the raw payload, retrying 5xx/408/429 and transport failures."""
        url = self.build_url(coordinates)
        state = RetryState(max_attempts=self.max_attempts)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.headers,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            while True:
                attempt = state.begin()
                logger.info(f"Hazard map API call (attempt {attempt}/{self.max_attempts}): {url}")

                try:
                    resp = await client.get(url)
                except httpx.TimeoutException as e:
                    state.record(ExternalApiError(
                        f"No response from Hazard Map API (timeout): {e}",
                        api_name=HAZARD_API_NAME,
                        no_response=True,
                    ), retryable=True)
                except httpx.TransportError as e:
                    state.record(ExternalApiError(
                        f"No response from Hazard Map API (connection error): {e}",
                        api_name=HAZARD_API_NAME,
                        no_response=True,
                    ), retryable=True)
                else:
                    if resp.is_success:
                        logger.info(f"Hazard map API call succeeded (attempt {attempt})")
                        return self._decode(resp)
                    state.record(ExternalApiError(
                        f"Hazard Map API error: {resp.status_code} {resp.reason_phrase}",
                        status_code=resp.status_code,
                        api_name=HAZARD_API_NAME,
                    ), retryable=is_retryable_status(resp.status_code))

                if not state.should_retry():
                    logger.error(f"Hazard map API failed after {attempt} attempt(s): {state.last_error}")
                    raise state.last_error

                logger.warning(
                    f"Hazard map API error ({state.last_error}) - retrying in "
                    f"{self.retry_delay}s (attempt {attempt}/{self.max_attempts})"
                )
                await self.sleep(self.retry_delay)

    def _decode(self, resp: httpx.Response) -> dict:
        try:
            return resp.json()
        except ValueError as e:
            raise ExternalApiError(
                f"Failed to parse Hazard Map API response: {e}",
                api_name=HAZARD_PARSER_API_NAME,
            ) from e


hazard_map_client = HazardMapClient()
