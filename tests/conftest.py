import copy
import os

os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402

from disaster_info.core.models import Coordinates  # noqa: E402

TOKYO = Coordinates(latitude=35.6762, longitude=139.6503)
OSAKA = Coordinates(latitude=34.6937, longitude=135.5023)
OKAYAMA = Coordinates(latitude=34.6993494, longitude=133.9110238)

NONE_INFO = {"max_info": "該当なし", "center_info": "該当なし"}

BASE_PAYLOAD = {
    "coordinates": {"latitude": 34.6993494, "longitude": 133.9110238},
    "source": "座標: 34.6993494, 133.9110238 (入力座標系: wgs84)",
    "input_type": "latlon",
    "datum": "wgs84",
    "hazard_info": {
        "jshis_prob_50": {"max_prob": 0.500778, "center_prob": 0.43957},
        "jshis_prob_60": {"max_prob": 0.005517, "center_prob": 0.002745},
        "inundation_depth": {"max_info": "浸水なし", "center_info": "浸水なし"},
        "tsunami_inundation": {"max_info": "浸水想定なし", "center_info": "浸水想定なし"},
        "hightide_inundation": {"max_info": "浸水想定なし", "center_info": "浸水想定なし"},
        "large_fill_land": {"max_info": "あり", "center_info": "あり"},
        "landslide_hazard": {
            "debris_flow": dict(NONE_INFO),
            "steep_slope": dict(NONE_INFO),
            "landslide": dict(NONE_INFO),
        },
    },
    "status": "success",
}


def make_payload(**overrides) -> dict:
    """Copy of the Okayama sample with hazard_info sections replaced."""
    payload = copy.deepcopy(BASE_PAYLOAD)
    payload["hazard_info"].update(overrides)
    return payload


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeHazardClient:
    """Stands in for HazardMapClient; returns a payload or raises."""

    def __init__(self, payload=None, error=None):
        self.payload = payload if payload is not None else make_payload()
        self.error = error
        self.calls = []

    async def fetch_hazard_payload(self, coordinates):
        self.calls.append(coordinates)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def sample_payload():
    return make_payload()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
