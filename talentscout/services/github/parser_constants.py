from __future__ import annotations

import re

RATE_LIMIT_KEYWORDS = [
    "rate limit",
    "abuse detection",
    "secondary rate limit",
    "too many requests",
]

LOGIN_REQUIRED_KEYWORDS = [
    "sign in to github",
]

NO_RESULTS_KEYWORDS = [
    "we couldn't find any users matching",
    "we couldn’t find any users matching",
]

# GitHub logins: alphanumerics and single inner hyphens, at most 39 characters.
GITHUB_USERNAME_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")
FIRST_NUMBER_RE = re.compile(r"\d[\d,]*")
NON_DIGIT_RE = re.compile(r"\D")

RESERVED_TOP_LEVEL_PATHS = frozenset(
    {
        "about",
        "explore",
        "features",
        "login",
        "marketplace",
        "notifications",
        "orgs",
        "pricing",
        "pulls",
        "search",
        "settings",
        "signup",
        "sponsors",
        "topics",
        "trending",
    }
)
