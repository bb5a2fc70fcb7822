from __future__ import annotations

import json
from datetime import datetime, timezone

from talentscout.services.enrichment.response_parser import UNPARSEABLE_RESPONSE, parse_insight_response
from talentscout.services.enrichment.types import Insight, InsightError

FIXED_NOW = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)

STRUCTURED = {
    "primary_skills": "Rust, Go",
    "tech_stack": "tokio, axum, PostgreSQL",
    "experience_level": "advanced",
    "notable_contributions": "Maintains an async runtime",
    "professional_summary": "Systems engineer focused on networking.",
}

LABELED = """Here is what I found.

**Primary skills:** Rust, Go
Tech stack: tokio, axum, PostgreSQL
Experience level: advanced
- Notable contributions: Maintains an
  async runtime
Professional summary: Systems engineer focused
on networking.
"""


def test_structured_block_is_extracted_from_surrounding_prose() -> None:
    text = "Sure! Here is the analysis:\n```json\n" + json.dumps(STRUCTURED) + "\n```\nHope this helps."

    insight = parse_insight_response(text, now=FIXED_NOW)

    assert isinstance(insight, Insight)
    for key, value in STRUCTURED.items():
        assert getattr(insight, key) == value
    assert insight.raw_response == text
    assert insight.timestamp == "2026-03-01T12:30:00Z"


def test_structured_block_keeps_unknown_keys_and_non_string_values() -> None:
    payload = {"primary_skills": ["Rust", "Go"], "confidence": 0.8}

    insight = parse_insight_response(json.dumps(payload), now=FIXED_NOW)

    assert isinstance(insight, Insight)
    assert insight.primary_skills == ["Rust", "Go"]
    assert insight.tech_stack == ""
    data = insight.to_dict()
    assert data["confidence"] == 0.8
    assert data["primary_skills"] == ["Rust", "Go"]


def test_labeled_lines_parse_to_same_values_as_structured_block() -> None:
    structured = parse_insight_response(json.dumps(STRUCTURED), now=FIXED_NOW)
    labeled = parse_insight_response(LABELED, now=FIXED_NOW)

    assert isinstance(structured, Insight)
    assert isinstance(labeled, Insight)
    for key in STRUCTURED:
        assert getattr(labeled, key) == getattr(structured, key)
    assert labeled.raw_response == LABELED


def test_invalid_json_falls_back_to_labeled_lines() -> None:
    text = "{not json}\nPrimary skills: Python\nExperience level: intermediate"

    insight = parse_insight_response(text, now=FIXED_NOW)

    assert isinstance(insight, Insight)
    assert insight.primary_skills == "Python"
    assert insight.experience_level == "intermediate"
    assert insight.tech_stack == ""


def test_labels_are_matched_case_insensitively() -> None:
    insight = parse_insight_response("PRIMARY SKILLS: Haskell", now=FIXED_NOW)

    assert isinstance(insight, Insight)
    assert insight.primary_skills == "Haskell"


def test_unparseable_text_becomes_error_with_raw_response() -> None:
    text = "I am unable to analyze this profile."

    result = parse_insight_response(text, now=FIXED_NOW)

    assert isinstance(result, InsightError)
    assert result.error == UNPARSEABLE_RESPONSE
    assert result.to_dict() == {
        "error": UNPARSEABLE_RESPONSE,
        "status": "error",
        "timestamp": "2026-03-01T12:30:00Z",
        "raw_response": text,
    }


def test_empty_text_yields_error_without_insight_fields() -> None:
    for text in ("", "   \n", None):
        result = parse_insight_response(text, now=FIXED_NOW)

        assert isinstance(result, InsightError)
        assert "primary_skills" not in result.to_dict()
