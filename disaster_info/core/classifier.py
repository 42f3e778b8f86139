"""Hazard map payload classification.

Turns the upstream per-dimension values (probabilities and free-text depth or
category buckets) into ``HazardInfo`` records on the risk ladder. Each text
dimension is driven by an ordered rule table evaluated top-down; the first
matching rule decides. A rule whose level is ``None`` means "no risk" and the
dimension is left out of the output. Nothing is ever emitted as ``low``.

The upstream vocabulary is the Japanese hazard portal wording; English
aliases are accepted as well.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger
from pydantic import BaseModel, ValidationError

from disaster_info.core.errors import ExternalApiError
from disaster_info.core.models import HazardInfo, HazardType, RiskLevel
from disaster_info.utils.constants import (
    HAZARD_ATTRIBUTIONS,
    HAZARD_PARSER_API_NAME,
    LARGE_FILL_SNAPSHOT,
)


# ============ PAYLOAD SHAPE ============

class ProbabilityExtent(BaseModel):
    max_prob: Optional[float] = None
    center_prob: Optional[float] = None


class TextExtent(BaseModel):
    max_info: Optional[str] = None
    center_info: Optional[str] = None

    @property
    def values(self) -> list:
        return [(v or "").strip() for v in (self.max_info, self.center_info)]


class LandslideSection(BaseModel):
    debris_flow: TextExtent
    steep_slope: TextExtent
    landslide: TextExtent


class HazardSection(BaseModel):
    jshis_prob_50: ProbabilityExtent
    inundation_depth: TextExtent
    tsunami_inundation: TextExtent
    hightide_inundation: TextExtent
    large_fill_land: TextExtent
    landslide_hazard: LandslideSection


class HazardMapResponse(BaseModel):
    status: str
    hazard_info: HazardSection


# ============ RULES ============

@dataclass(frozen=True)
class Rule:
    matches: Callable[[str], bool]
    level: Optional[RiskLevel]
    template: str = ""
    fallback: bool = False


def contains_any(*tokens: str) -> Callable[[str], bool]:
    lowered = [t.lower() for t in tokens]
    return lambda text: any(t in text.lower() for t in lowered)


def equals_any(*tokens: str) -> Callable[[str], bool]:
    lowered = {t.lower() for t in tokens}
    return lambda text: text.strip().lower() in lowered


def depth_at_least(*meters: str) -> Callable[[str], bool]:
    # "0.5m以上" must not read as "5m以上"
    alts = "|".join(re.escape(m) for m in meters)
    pattern = re.compile(rf"(?<![\d.])(?:{alts})\s?m\s?(?:以上|\+|or more)", re.I)
    return lambda text: bool(pattern.search(text))


def depth_under(*meters: str) -> Callable[[str], bool]:
    alts = "|".join(re.escape(m) for m in meters)
    pattern = re.compile(rf"(?<![\d.])(?:{alts})\s?m\s?未満|under\s?(?:{alts})\s?m", re.I)
    return lambda text: bool(pattern.search(text))


def either(*predicates: Callable[[str], bool]) -> Callable[[str], bool]:
    return lambda text: any(p(text) for p in predicates)


def always(text: str) -> bool:
    return True


NO_INUNDATION = equals_any("", "浸水想定なし", "浸水なし", "情報なし", "no inundation expected", "no data")
NOT_APPLICABLE = ("該当なし", "not applicable")


def depth_rules(label: str) -> tuple:
    return (
        Rule(NO_INUNDATION, None),
        Rule(depth_at_least("5", "10", "20"), RiskLevel.VERY_HIGH,
             f"Very high {label} risk. Expected inundation depth: {{info}}"),
        Rule(either(depth_at_least("3"), depth_under("5")), RiskLevel.HIGH,
             f"High {label} risk. Expected inundation depth: {{info}}"),
        Rule(either(depth_at_least("1", "0.5"), depth_under("3")), RiskLevel.MEDIUM,
             f"Moderate {label} risk. Expected inundation depth: {{info}}"),
        Rule(always, None),
    )


FLOOD_RULES = depth_rules("flood")
TSUNAMI_RULES = depth_rules("tsunami")
HIGH_TIDE_RULES = depth_rules("storm surge")

LARGE_FILL_PRESENT = "Matches large-scale fill land."

LARGE_FILL_RULES = (
    Rule(equals_any("", "情報なし", "no data", *NOT_APPLICABLE), None),
    Rule(contains_any("警戒", "危険", "warning", "danger"), RiskLevel.HIGH,
         "Designated as large-scale fill land. {info}"),
    Rule(contains_any("注意", "caution"), RiskLevel.MEDIUM,
         "Possibly large-scale fill land. {info}"),
    Rule(contains_any("あり", "present"), RiskLevel.MEDIUM, LARGE_FILL_PRESENT),
    Rule(always, RiskLevel.MEDIUM, "Large-scale fill land information is available. {info}", fallback=True),
)

# (threshold, level, label)
EARTHQUAKE_THRESHOLDS = (
    (0.8, RiskLevel.VERY_HIGH, "Very high"),
    (0.6, RiskLevel.HIGH, "High"),
    (0.3, RiskLevel.MEDIUM, "Moderate"),
)

LANDSLIDE_KINDS = (
    ("debris_flow", "debris flow"),
    ("steep_slope", "steep slope failure"),
    ("landslide", "landslide"),
)

LANDSLIDE_LEVELS = (
    (contains_any("特別警戒区域", "specially cautioned area"), RiskLevel.VERY_HIGH),
    (contains_any("警戒区域", "cautioned area"), RiskLevel.HIGH),
)


def evaluate(rules: tuple, value: str) -> Optional[Rule]:
    for rule in rules:
        if rule.matches(value):
            return rule
    return None


# ============ CLASSIFIER ============

class HazardClassifier:
    """Maps a raw hazard map payload onto the normalized risk taxonomy."""

    def classify(self, payload: dict, now: Optional[datetime] = None) -> list:
        response = self._validate(payload)
        section = response.hazard_info
        now = now or datetime.now(timezone.utc)

        classified = [
            (HazardType.EARTHQUAKE, self._earthquake(section.jshis_prob_50)),
            (HazardType.FLOOD, self._text(FLOOD_RULES, section.inundation_depth, "inundation_depth")),
            (HazardType.TSUNAMI, self._text(TSUNAMI_RULES, section.tsunami_inundation, "tsunami_inundation")),
            (HazardType.LARGE_SCALE_FILL, self._text(LARGE_FILL_RULES, section.large_fill_land, "large_fill_land")),
            (HazardType.HIGH_TIDE, self._text(HIGH_TIDE_RULES, section.hightide_inundation, "hightide_inundation")),
            (HazardType.LANDSLIDE, self._landslide(section.landslide_hazard)),
        ]

        hazards = []
        for hazard_type, result in classified:
            if result is None:
                continue
            level, description = result
            attribution = HAZARD_ATTRIBUTIONS[hazard_type.value]
            hazards.append(HazardInfo(
                type=hazard_type,
                risk_level=level,
                description=description,
                source=attribution.name,
                last_updated=LARGE_FILL_SNAPSHOT if hazard_type == HazardType.LARGE_SCALE_FILL else now,
                detail_url=attribution.url,
            ))

        logger.info(f"Classified {len(hazards)} hazard(s): {[h.type.value for h in hazards]}")
        return hazards

    def _validate(self, payload) -> HazardMapResponse:
        if not isinstance(payload, dict):
            raise ExternalApiError(
                f"Failed to parse Hazard Map API response: expected object, got {type(payload).__name__}",
                api_name=HAZARD_PARSER_API_NAME,
            )
        status = payload.get("status")
        if status != "success":
            raise ExternalApiError(
                f"Failed to parse Hazard Map API response: API response status is not success: {status}",
                api_name=HAZARD_PARSER_API_NAME,
            )
        try:
            return HazardMapResponse.model_validate(payload)
        except ValidationError as e:
            raise ExternalApiError(
                f"Failed to parse Hazard Map API response: {e.error_count()} invalid field(s)",
                api_name=HAZARD_PARSER_API_NAME,
            ) from e

    def _earthquake(self, extent: ProbabilityExtent) -> Optional[tuple]:
        probs = [p for p in (extent.max_prob, extent.center_prob) if p is not None]
        if not probs:
            raise ExternalApiError(
                "Failed to parse Hazard Map API response: no earthquake probability",
                api_name=HAZARD_PARSER_API_NAME,
            )
        prob = max(probs)
        for threshold, level, label in EARTHQUAKE_THRESHOLDS:
            if prob >= threshold:
                return level, f"{label} earthquake risk. J-SHIS 50-year probability: {prob * 100:.1f}%"
        return None

    def _values(self, extent: TextExtent, name: str) -> list:
        # "" is a real "nothing here"; a missing value is a broken payload
        if extent.max_info is None and extent.center_info is None:
            raise ExternalApiError(
                f"Failed to parse Hazard Map API response: no value for {name}",
                api_name=HAZARD_PARSER_API_NAME,
            )
        return extent.values

    def _text(self, rules: tuple, extent: TextExtent, name: str) -> Optional[tuple]:
        """Most severe interpretation across the max and center values."""
        best = None
        for value in self._values(extent, name):
            rule = evaluate(rules, value)
            if rule is None or rule.level is None:
                continue
            if rule.fallback:
                logger.warning(f"Unrecognized upstream value '{value}', treating as {rule.level.value}")
            if best is None or rule.level > best[0]:
                best = (rule.level, rule.template.format(info=value))
        return best

    def _landslide(self, section: LandslideSection) -> Optional[tuple]:
        applicable = []
        texts = []
        for field_name, label in LANDSLIDE_KINDS:
            values = [v for v in self._values(getattr(section, field_name), f"landslide_hazard.{field_name}") if v]
            if any(not contains_any(*NOT_APPLICABLE)(v) for v in values):
                applicable.append(label)
            texts.extend(values)

        if not applicable:
            return None

        combined = " ".join(texts)
        level = RiskLevel.MEDIUM
        for predicate, candidate in LANDSLIDE_LEVELS:
            if predicate(combined):
                level = candidate
                break

        return level, f"Landslide risk present. Affected: {', '.join(applicable)}"


hazard_classifier = HazardClassifier()


def classify(payload: dict, now: Optional[datetime] = None) -> list:
    return hazard_classifier.classify(payload, now=now)
