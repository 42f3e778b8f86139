"""Synthetic disaster history with a curation pipeline.

Events are generated from the query coordinates with seeded hashing (no
archive is queried), then curated:

1. drop duplicates sharing (type, date), first occurrence wins
2. drop events whose severity weight is below MIN_IMPORTANCE
3. rank by weight, then date, both descending
4. keep the first ``max_events``
5. sort the survivors by date, newest first

Step 5 discards the ranking order from step 3; importance only decides which
events survive truncation.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from loguru import logger

from disaster_info.core import seeding
from disaster_info.core.models import Coordinates, DisasterEvent
from disaster_info.utils.config import settings
from disaster_info.utils.constants import DEFAULT_IMPORTANCE, MIN_IMPORTANCE

JMA = "Japan Meteorological Agency"
MUNICIPALITY = "Municipality"
MLIT = "Ministry of Land, Infrastructure, Transport and Tourism"


@dataclass(frozen=True)
class DisasterKind:
    type: str
    severities: tuple
    sources: tuple
    template: str


CATALOG = (
    DisasterKind("Typhoon", ("minor", "moderate", "severe"), (JMA, MUNICIPALITY),
                 "Typhoon damage occurred on {date}. Damage scale: {severity}"),
    DisasterKind("Heavy Rain", ("advisory", "warning", "danger"), (JMA, "River Office"),
                 "Heavy rain damage occurred on {date}. Alert level: {severity}"),
    DisasterKind("Earthquake",
                 ("intensity 3", "intensity 4", "intensity 5 lower", "intensity 5 upper", "intensity 6 lower"),
                 (JMA, "Earthquake Research Committee"),
                 "An earthquake occurred on {date}. Maximum seismic intensity: {severity}"),
    DisasterKind("Flood", ("small-scale", "medium-scale", "large-scale"), (MLIT, MUNICIPALITY),
                 "A flood occurred on {date}. Damage scale: {severity}"),
    DisasterKind("Landslide", ("small-scale", "medium-scale", "large-scale"), ("MLIT Sabo Department", MUNICIPALITY),
                 "A landslide occurred on {date}. Damage scale: {severity}"),
    DisasterKind("Tsunami", ("tsunami advisory", "tsunami warning", "major tsunami warning"), (JMA,),
                 "A tsunami occurred on {date}. Warning level: {severity}"),
    DisasterKind("Tornado", ("F0", "F1", "F2"), (JMA,),
                 "A tornado occurred on {date}. Intensity: {severity}"),
    DisasterKind("Snow Damage", ("heavy snow advisory", "heavy snow warning", "blizzard warning"), (JMA,),
                 "Snow damage occurred on {date}. Warning level: {severity}"),
)

IMPORTANCE = {
    # Earthquake
    "intensity 6 lower": 10,
    "intensity 5 upper": 9,
    "intensity 5 lower": 8,
    "intensity 4": 6,
    "intensity 3": 4,
    # Tsunami
    "major tsunami warning": 10,
    "tsunami warning": 8,
    "tsunami advisory": 6,
    # Typhoon / heavy rain
    "severe": 9,
    "danger": 8,
    "moderate": 6,
    "warning": 5,
    "minor": 3,
    "advisory": 3,
    # Flood / landslide
    "large-scale": 8,
    "medium-scale": 6,
    "small-scale": 4,
    # Tornado
    "F2": 8,
    "F1": 6,
    "F0": 4,
    # Snow
    "blizzard warning": 7,
    "heavy snow warning": 6,
    "heavy snow advisory": 4,
}

MIN_EVENTS = 10
MAX_EVENTS = 39


def importance(severity: str) -> int:
    return IMPORTANCE.get(severity, DEFAULT_IMPORTANCE)


class HistorySynthesizer:
    """Generates and curates a reproducible event history for a point."""

    def __init__(
        self,
        years: Optional[int] = None,
        max_events: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.years = years or settings.service.history_years
        self.max_events = max_events or settings.service.max_history_events
        self.clock = clock

    def synthesize(self, coordinates: Coordinates) -> list:
        raw = self.generate(coordinates)
        curated = self.curate(raw)
        logger.debug(f"History: {len(raw)} generated, {len(curated)} after curation")
        return curated

    def generate(self, coordinates: Coordinates) -> list:
        lat, lon = coordinates.latitude, coordinates.longitude
        count = seeding.count_between(lat, lon, 10000, 10000, MIN_EVENTS, MAX_EVENTS)
        start_year = self.clock().year - self.years

        events = []
        for i in range(count):
            p = seeding.slot_product(lat, lon, i)
            kind = seeding.pick(CATALOG, p, 1000)

            year = start_year + seeding.draw_int(seeding.wave(p, 200), 0, self.years - 1)
            month = seeding.draw_int(seeding.wave(p, 300, fn=math.cos), 1, 12)
            day = seeding.draw_int(seeding.wave(p, 400), 1, 28)

            severity = seeding.pick(kind.severities, p, 500)
            source = seeding.pick(kind.sources, p, 600)
            when = date(year, month, day)

            events.append(DisasterEvent(
                type=kind.type,
                date=when,
                description=kind.template.format(date=when.isoformat(), severity=severity),
                severity=severity,
                source=source,
            ))
        return events

    def curate(self, events: list) -> list:
        unique = self.remove_duplicates(events)
        important = [e for e in unique if importance(e.severity) >= MIN_IMPORTANCE]
        ranked = sorted(important, key=lambda e: (importance(e.severity), e.date), reverse=True)
        kept = ranked[: self.max_events]
        return sorted(kept, key=lambda e: e.date, reverse=True)

    @staticmethod
    def remove_duplicates(events: list) -> list:
        seen = set()
        unique = []
        for event in events:
            key = (event.type, event.date)
            if key in seen:
                continue
            seen.add(key)
            unique.append(event)
        return unique


history_synthesizer = HistorySynthesizer()


def synthesize_history(coordinates: Coordinates) -> list:
    return history_synthesizer.synthesize(coordinates)
