from __future__ import annotations

from talentscout.services.github.parser_constants import (
    LOGIN_REQUIRED_KEYWORDS,
    NO_RESULTS_KEYWORDS,
    RATE_LIMIT_KEYWORDS,
)

WARNING_RATE_LIMIT = "rate_limit_detected"
WARNING_LOGIN_REQUIRED = "login_required"
WARNING_NO_RESULTS = "no_results_reported"

BLOCKING_WARNINGS = frozenset({WARNING_RATE_LIMIT, WARNING_LOGIN_REQUIRED})


def _contains_any(text: str, keywords: list[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def detect_page_warnings(html: str) -> list[str]:
    lowered = html.lower()
    warnings: list[str] = []
    if _contains_any(lowered, RATE_LIMIT_KEYWORDS):
        warnings.append(WARNING_RATE_LIMIT)
    # A sign-in banner alone is normal for anonymous pages; require a login form too.
    if _contains_any(lowered, LOGIN_REQUIRED_KEYWORDS) and 'name="login"' in lowered:
        warnings.append(WARNING_LOGIN_REQUIRED)
    if _contains_any(lowered, NO_RESULTS_KEYWORDS):
        warnings.append(WARNING_NO_RESULTS)
    return warnings


def is_blocked(warnings: list[str]) -> bool:
    return any(warning in BLOCKING_WARNINGS for warning in warnings)
