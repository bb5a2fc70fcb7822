from __future__ import annotations

from html import unescape
from urllib.parse import urljoin, urlparse

from bs4 import Tag

from talentscout.services.github.parser_constants import (
    FIRST_NUMBER_RE,
    GITHUB_USERNAME_RE,
    NON_DIGIT_RE,
    RESERVED_TOP_LEVEL_PATHS,
)
from talentscout.settings import settings


def normalize_space(value: str) -> str:
    return " ".join(unescape(value).split())


def node_text(node: Tag | None) -> str:
    if node is None:
        return ""
    return normalize_space(node.get_text(" "))


def select_text(root: Tag, selector: str) -> str:
    return node_text(root.select_one(selector))


def digits_only(value: str | None) -> int:
    digits = NON_DIGIT_RE.sub("", value or "")
    return int(digits) if digits else 0


def first_count(value: str | None) -> int:
    match = FIRST_NUMBER_RE.search(value or "")
    if match is None:
        return 0
    return digits_only(match.group(0))


def is_github_username(value: str | None) -> bool:
    if not value:
        return False
    return GITHUB_USERNAME_RE.fullmatch(value) is not None


def is_github_host(hostname: str | None) -> bool:
    if not hostname:
        return False
    host = hostname.lower()
    configured = (urlparse(settings.github_base_url).hostname or "").lower()
    return host in {configured, "github.com"} or host.endswith(".github.com")


def username_from_href(href: str | None) -> str | None:
    if not href:
        return None
    parsed = urlparse(href)
    if parsed.netloc and not is_github_host(parsed.hostname):
        return None
    segments = [segment for segment in parsed.path.split("/") if segment]
    if len(segments) != 1:
        return None
    candidate = segments[0]
    if candidate.lower() in RESERVED_TOP_LEVEL_PATHS or not is_github_username(candidate):
        return None
    return candidate


def build_absolute_github_url(path_or_url: str | None) -> str | None:
    if not path_or_url:
        return None
    return urljoin(settings.github_base_url.rstrip("/") + "/", path_or_url)


def unique_in_order(values: list[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if not value or value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return tuple(ordered)
