from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

INSIGHT_FIELDS = (
    "primary_skills",
    "tech_stack",
    "experience_level",
    "notable_contributions",
    "professional_summary",
)


def utc_timestamp(now: datetime | None = None) -> str:
    value = now or datetime.now(UTC)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Insight:
    primary_skills: Any = ""
    tech_stack: Any = ""
    experience_level: Any = ""
    notable_contributions: Any = ""
    professional_summary: Any = ""
    raw_response: str = ""
    timestamp: str = field(default_factory=utc_timestamp)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        for name in INSIGHT_FIELDS:
            payload[name] = getattr(self, name)
        payload["raw_response"] = self.raw_response
        payload["timestamp"] = self.timestamp
        return payload


@dataclass(frozen=True)
class InsightError:
    error: str
    timestamp: str = field(default_factory=utc_timestamp)
    raw_response: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.error,
            "status": "error",
            "timestamp": self.timestamp,
        }
        if self.raw_response is not None:
            payload["raw_response"] = self.raw_response
        return payload
