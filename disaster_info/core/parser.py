"""Raw location input to validated coordinates."""

import re
from typing import Optional

from disaster_info.core.errors import InvalidInputError
from disaster_info.core.models import CoordinateSource, Coordinates
from disaster_info.utils.config import settings

FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")


class CoordinateParser:
    """Parse and validate latitude/longitude strings (Japan only)."""

    PAIR = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)\s*[,\s]\s*([+-]?\d+(?:\.\d+)?)\s*$")

    def __init__(self, bbox=None):
        self.bbox = bbox or settings.service.japan_bbox

    def parse(
        self,
        lat: str,
        lng: str,
        source: CoordinateSource = CoordinateSource.COORDINATES,
        address: Optional[str] = None,
    ) -> Coordinates:
        latitude = self._number(lat, "latitude", -90, 90)
        longitude = self._number(lng, "longitude", -180, 180)

        if not self.within_japan(latitude, longitude):
            raise InvalidInputError("Coordinates must be within Japan", "coordinates")

        return Coordinates(
            latitude=latitude,
            longitude=longitude,
            address=normalize_address(address) or None,
            source=source,
        )

    def parse_pair(self, text: str, source: CoordinateSource = CoordinateSource.COORDINATES) -> Coordinates:
        """Accepts "35.6762, 139.6503" or "35.6762 139.6503"."""
        m = self.PAIR.match(self.normalize(text))
        if not m:
            raise InvalidInputError("Expected 'latitude, longitude'", "coordinates")
        return self.parse(m.group(1), m.group(2), source=source)

    def within_japan(self, latitude: float, longitude: float) -> bool:
        return (
            self.bbox.south <= latitude <= self.bbox.north
            and self.bbox.west <= longitude <= self.bbox.east
        )

    def normalize(self, value) -> str:
        if not isinstance(value, str):
            return ""
        return value.strip().translate(FULLWIDTH_DIGITS).replace("．", ".").replace("，", ",")

    def _number(self, raw, name: str, low: float, high: float) -> float:
        text = self.normalize(raw)
        if not text:
            raise InvalidInputError(f"{name.capitalize()} is required", name)
        try:
            value = float(text)
        except ValueError:
            raise InvalidInputError(f"{name.capitalize()} must be a number", name)
        if value != value or not low <= value <= high:
            raise InvalidInputError(f"{name.capitalize()} must be between {low} and {high}", name)
        return value


def normalize_address(address: str) -> str:
    if not isinstance(address, str):
        return ""
    text = address.strip().translate(FULLWIDTH_DIGITS).replace("－", "-")
    return re.sub(r"\s+", " ", text)


coordinate_parser = CoordinateParser()
