"""Data models for disaster lookups."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional


class CoordinateSource(str, Enum):
    ADDRESS = "address"
    COORDINATES = "coordinates"
    GEOLOCATION = "geolocation"


class HazardType(str, Enum):
    FLOOD = "flood"
    EARTHQUAKE = "earthquake"
    LANDSLIDE = "landslide"
    TSUNAMI = "tsunami"
    LARGE_SCALE_FILL = "large_scale_fill"
    HIGH_TIDE = "high_tide"
    # Upstream dimensions not classified yet
    FLOOD_KEIZOKU = "flood_keizoku"
    NAISUI = "naisui"
    KAOKUTOUKAI_HANRAN = "kaokutoukai_hanran"
    KAOKUTOUKAI_KAGAN = "kaokutoukai_kagan"
    AVALANCHE = "avalanche"


class RiskLevel(str, Enum):
    """Ordered ladder: low < medium < high < very_high."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    # str comparisons would order alphabetically
    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.VERY_HIGH]


class AlertLevel(str, Enum):
    ADVISORY = "advisory"
    WARNING = "warning"
    EMERGENCY = "emergency"


@dataclass(frozen=True)
class Coordinates:
    """A validated point. Never mutated after construction."""
    latitude: float
    longitude: float
    address: Optional[str] = None
    source: CoordinateSource = CoordinateSource.COORDINATES

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if not isinstance(self.source, CoordinateSource):
            object.__setattr__(self, "source", CoordinateSource(self.source))

    def to_dict(self) -> dict:
        data = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "source": self.source.value,
        }
        if self.address:
            data["address"] = self.address
        return data


@dataclass
class HazardInfo:
    """One classified hazard dimension."""
    type: HazardType
    risk_level: RiskLevel
    description: str
    source: str
    last_updated: datetime
    detail_url: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "type": self.type.value,
            "riskLevel": self.risk_level.value,
            "description": self.description,
            "source": self.source,
            "lastUpdated": self.last_updated.isoformat(),
        }
        if self.detail_url:
            data["detailUrl"] = self.detail_url
        return data


@dataclass
class Shelter:
    name: str
    address: str
    coordinates: Coordinates
    capacity: int
    facilities: list = field(default_factory=list)
    distance: float = 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "coordinates": self.coordinates.to_dict(),
            "capacity": self.capacity,
            "facilities": list(self.facilities),
            "distance": self.distance,
        }


@dataclass
class DisasterEvent:
    type: str
    date: date
    description: str
    severity: str
    source: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "date": self.date.isoformat(),
            "description": self.description,
            "severity": self.severity,
            "source": self.source,
        }


@dataclass
class WeatherAlert:
    type: str
    level: AlertLevel
    description: str
    issued_at: datetime
    area: str
    valid_until: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = {
            "type": self.type,
            "level": self.level.value,
            "description": self.description,
            "issuedAt": self.issued_at.isoformat(),
            "area": self.area,
        }
        if self.valid_until:
            data["validUntil"] = self.valid_until.isoformat()
        return data


@dataclass
class DisasterInfo:
    """Complete lookup output."""
    coordinates: Coordinates
    hazard_info: list
    shelters: list
    disaster_history: list
    weather_alerts: list
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "coordinates": {
                "latitude": self.coordinates.latitude,
                "longitude": self.coordinates.longitude,
            },
            "hazardInfo": [h.to_dict() for h in self.hazard_info],
            "shelters": [s.to_dict() for s in self.shelters],
            "disasterHistory": [e.to_dict() for e in self.disaster_history],
            "weatherAlerts": [a.to_dict() for a in self.weather_alerts],
            "lastUpdated": self.last_updated.isoformat(),
        }
