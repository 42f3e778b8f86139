"""Synthetic evacuation shelter directory.

There is no shelter directory behind this module. Shelters are generated
from the query coordinates with seeded hashing, so the same point always
yields the same list. Integrators must treat the output as a reproducible
placeholder, not as real facility data.
"""

import math
from dataclasses import dataclass

from loguru import logger

from disaster_info.core import seeding
from disaster_info.core.errors import InternalError
from disaster_info.core.models import CoordinateSource, Coordinates, Shelter
from disaster_info.utils.constants import SHELTER_OFFSET_SPAN_DEG
from disaster_info.utils.geo import haversine_km


@dataclass(frozen=True)
class ShelterArchetype:
    name: str
    facilities: tuple
    capacity: tuple  # (min, max)


ARCHETYPES = (
    ShelterArchetype("Citizens' Gymnasium", ("gymnasium", "parking", "first-aid room"), (800, 1200)),
    ShelterArchetype("Elementary School", ("gymnasium", "classrooms", "schoolyard"), (300, 600)),
    ShelterArchetype("Junior High School", ("gymnasium", "classrooms", "schoolyard", "pool"), (400, 800)),
    ShelterArchetype("Community Hall", ("hall", "meeting rooms", "parking"), (150, 300)),
    ShelterArchetype("District Center", ("multipurpose room", "parking"), (100, 200)),
    ShelterArchetype("High School", ("gymnasium", "classrooms", "schoolyard", "cafeteria"), (500, 1000)),
    ShelterArchetype("Community Center", ("hall", "meeting rooms"), (80, 150)),
    ShelterArchetype("General Hospital", ("medical equipment", "parking", "heliport"), (200, 400)),
)

PREFECTURES = ("Tokyo", "Kanagawa", "Chiba", "Saitama", "Osaka", "Aichi", "Fukuoka")
CITIES = ("Chuo", "Minato", "Shinjuku", "Shibuya", "Setagaya", "Nerima", "Adachi")
TOWNS = ("Honmachi", "Nakamachi", "Higashimachi", "Nishimachi", "Minamimachi", "Kitamachi", "Midorimachi")

MIN_SHELTERS = 5
MAX_SHELTERS = 10


def _wrap_longitude(lon: float) -> float:
    if -180 <= lon <= 180:
        return lon
    return ((lon + 180) % 360) - 180


class ShelterSynthesizer:
    """Deterministic stand-in for a municipal shelter directory."""

    def synthesize(self, coordinates: Coordinates) -> list:
        lat, lon = coordinates.latitude, coordinates.longitude
        count = seeding.count_between(lat, lon, 1000, 1000, MIN_SHELTERS, MAX_SHELTERS)

        shelters = [self._build(coordinates, i) for i in range(count)]
        shelters.sort(key=lambda s: s.distance)

        logger.debug(f"Synthesized {len(shelters)} shelters around ({lat}, {lon})")
        return shelters

    def _build(self, origin: Coordinates, index: int) -> Shelter:
        lat, lon = origin.latitude, origin.longitude
        archetype = seeding.pick(ARCHETYPES, seeding.slot_product(lat, lon, index), 100)

        offset_lat = (seeding.wave(lat + index, 100, math.sin) - 0.5) * SHELTER_OFFSET_SPAN_DEG
        offset_lon = (seeding.wave(lon + index, 100, math.cos) - 0.5) * SHELTER_OFFSET_SPAN_DEG
        position = Coordinates(
            latitude=max(-90.0, min(90.0, lat + offset_lat)),
            longitude=_wrap_longitude(lon + offset_lon),
            source=CoordinateSource.COORDINATES,
        )

        distance = haversine_km(lat, lon, position.latitude, position.longitude)
        capacity = self._capacity(archetype, lat, lon, index)

        if math.isnan(distance) or distance < 0 or capacity < 0:
            raise InternalError(
                f"Shelter synthesis produced an impossible value (distance={distance}, capacity={capacity})"
            )

        suffix = f" {seeding.bucket(lat * lon * (index + 1), 100, 20) + 1}" if index > 0 else ""

        return Shelter(
            name=f"{archetype.name}{suffix}",
            address=self._address(position.latitude, position.longitude),
            coordinates=position,
            capacity=capacity,
            facilities=list(archetype.facilities),
            distance=round(distance, 2),
        )

    def _capacity(self, archetype: ShelterArchetype, lat: float, lon: float, index: int) -> int:
        low, high = archetype.capacity
        fraction = seeding.wave(seeding.slot_product(lat, lon, index), 50)
        return seeding.draw_int(fraction, low, high)

    def _address(self, lat: float, lon: float) -> str:
        """Placeholder street address; a reverse geocoder would replace this."""
        prefecture = seeding.pick(PREFECTURES, lat * lon, 100)
        city = seeding.pick(CITIES, lat, 100)
        town = seeding.pick(TOWNS, lon, 100)
        chome = seeding.bucket(lat * lon, 1000, 5) + 1
        banchi = seeding.bucket(lat * lon, 10000, 20) + 1
        return f"{chome}-{banchi} {town}, {city}, {prefecture}"


shelter_synthesizer = ShelterSynthesizer()


def synthesize_shelters(coordinates: Coordinates) -> list:
    return shelter_synthesizer.synthesize(coordinates)
