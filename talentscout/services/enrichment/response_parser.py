from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any

from talentscout.logging_utils import structured_log
from talentscout.services.enrichment.types import INSIGHT_FIELDS, Insight, InsightError, utc_timestamp

logger = logging.getLogger(__name__)

UNPARSEABLE_RESPONSE = "unparseable_response"

FALLBACK_LABELS = {
    "primary_skills": "primary skills",
    "tech_stack": "tech stack",
    "experience_level": "experience level",
    "notable_contributions": "notable contributions",
    "professional_summary": "professional summary",
}

_MARKUP_RE = re.compile(r"[*_`]")
_SPACE_RE = re.compile(r"\s+")


def _clean(value: str) -> str:
    return _SPACE_RE.sub(" ", _MARKUP_RE.sub("", value)).strip()


def _parse_json_block(text: str) -> dict[str, Any] | None:
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        payload = json.loads(text[start : end + 1])
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _labeled_value(lines: list[str], index: int) -> str:
    _, _, remainder = lines[index].partition(":")
    parts = [remainder]
    for line in lines[index + 1 :]:
        if not line.strip() or ":" in line:
            break
        parts.append(line)
    return _clean(" ".join(parts))


def _parse_labeled_lines(text: str) -> dict[str, str]:
    lines = text.splitlines()
    found: dict[str, str] = {}
    for field_name, label in FALLBACK_LABELS.items():
        for index, line in enumerate(lines):
            head, separator, _ = line.partition(":")
            if separator and label in head.lower():
                found[field_name] = _labeled_value(lines, index)
                break
    return found


def parse_insight_response(text: str | None, *, now: datetime | None = None) -> Insight | InsightError:
    """Turn a free-form model answer into an ``Insight``.

    A JSON object embedded anywhere in the text wins. Otherwise lines such as
    ``Primary skills: ...`` are scanned. When neither yields anything the raw
    text is kept on an ``InsightError``.
    """
    timestamp = utc_timestamp(now)
    raw = text or ""
    if not raw.strip():
        return InsightError(error=UNPARSEABLE_RESPONSE, timestamp=timestamp, raw_response=raw)

    payload = _parse_json_block(raw)
    if payload is not None:
        fields = {name: payload[name] for name in INSIGHT_FIELDS if name in payload}
        extra = {key: value for key, value in payload.items() if key not in INSIGHT_FIELDS}
        return Insight(**fields, raw_response=raw, timestamp=timestamp, extra=extra)

    labeled = _parse_labeled_lines(raw)
    if labeled:
        structured_log(logger, "debug", "insight_parser.labeled_fallback", fields=sorted(labeled))
        return Insight(**labeled, raw_response=raw, timestamp=timestamp)

    structured_log(logger, "warning", "insight_parser.unparseable", response_chars=len(raw))
    return InsightError(error=UNPARSEABLE_RESPONSE, timestamp=timestamp, raw_response=raw)
