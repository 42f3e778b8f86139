"""Output formatters for lookup results."""

import json

from disaster_info.core.models import DisasterInfo, RiskLevel

RISK_LABELS = {
    RiskLevel.LOW: "LOW",
    RiskLevel.MEDIUM: "MEDIUM",
    RiskLevel.HIGH: "HIGH",
    RiskLevel.VERY_HIGH: "VERY HIGH",
}


class TextFormatter:
    """Plain-text summary for terminals."""

    def format(self, info: DisasterInfo, max_shelters: int = 5, max_events: int = 10) -> str:
        c = info.coordinates
        lines = [
            f"Disaster info for ({c.latitude:.6f}, {c.longitude:.6f})"
            + (f" - {c.address}" if c.address else ""),
            f"Generated: {info.last_updated.strftime('%Y-%m-%d %H:%M')} UTC",
            "",
            "HAZARDS:",
        ]

        if info.hazard_info:
            ranked = sorted(info.hazard_info, key=lambda h: h.risk_level, reverse=True)
            for h in ranked:
                lines.append(f"- [{RISK_LABELS[h.risk_level]}] {h.type.value}: {h.description}")
                lines.append(f"    source: {h.source}")
        else:
            lines.append("- No significant hazards reported.")

        lines.extend(["", "NEAREST SHELTERS:"])
        for s in info.shelters[:max_shelters]:
            lines.append(f"- {s.name} ({s.distance:.2f} km, capacity {s.capacity}) {s.address}")

        lines.extend(["", "RECENT DISASTERS:"])
        for e in info.disaster_history[:max_events]:
            lines.append(f"- {e.date.isoformat()} {e.type} [{e.severity}]")

        if info.weather_alerts:
            lines.extend(["", "WEATHER ALERTS:"])
            for a in info.weather_alerts:
                lines.append(f"- [{a.level.value.upper()}] {a.type}: {a.description}")

        lines.extend([
            "",
            "---",
            "*Shelters and disaster history are synthetic placeholders, not official data.*",
        ])
        return "\n".join(lines)


class JSONFormatter:

    def format(self, info: DisasterInfo) -> dict:
        return info.to_dict()

    def to_json(self, info: DisasterInfo) -> str:
        return json.dumps(self.format(info), ensure_ascii=False, indent=2, default=str)


def format_output(info: DisasterInfo, style: str = "text") -> str:
    if style == "json":
        return JSONFormatter().to_json(info)
    return TextFormatter().format(info)
