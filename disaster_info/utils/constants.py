"""Project-wide constants."""

from dataclasses import dataclass
from datetime import datetime, timezone

HAZARD_API_NAME = "hazard-map-api"
HAZARD_PARSER_API_NAME = "hazard-map-api-parser"
SHELTER_API_NAME = "shelter-api"
HISTORY_API_NAME = "disaster-history-api"
WEATHER_API_NAME = "weather-api"

RETRYABLE_STATUS_CODES = frozenset({408, 429})

EARTH_RADIUS_KM = 6371.0

# Roughly 5 km either way
SHELTER_OFFSET_SPAN_DEG = 0.09

MAX_HISTORY_EVENTS = 50
MIN_IMPORTANCE = 3
DEFAULT_IMPORTANCE = 1


@dataclass(frozen=True)
class Attribution:
    name: str
    url: str


HAZARD_ATTRIBUTIONS = {
    "earthquake": Attribution(
        name="Headquarters for Earthquake Research Promotion (J-SHIS)",
        url="https://www.j-shis.bosai.go.jp/",
    ),
    "flood": Attribution(
        name="MLIT Hazard Map Portal",
        url="https://disaportal.gsi.go.jp/",
    ),
    "tsunami": Attribution(
        name="Japan Meteorological Agency",
        url="https://www.jma.go.jp/jma/kishou/know/tsunami/",
    ),
    "large_scale_fill": Attribution(
        name="MLIT National Spatial Planning and Regional Policy Bureau",
        url="https://www.mlit.go.jp/toshi/toshi_tobou_fr_000004.html",
    ),
    "high_tide": Attribution(
        name="MLIT Ports and Harbours Bureau",
        url="https://www.mlit.go.jp/kowan/",
    ),
    "landslide": Attribution(
        name="MLIT Sabo Department",
        url="https://www.mlit.go.jp/river/sabo/",
    ),
}

# Vintage of the large-scale fill land dataset
LARGE_FILL_SNAPSHOT = datetime(2023, 3, 31, tzinfo=timezone.utc)

TIMEOUT_MESSAGE = "Hazard map API is taking too long to respond. Please try again later."
OVERLOADED_MESSAGE = "Hazard map API server is overloaded. Please try again later."
