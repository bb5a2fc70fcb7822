from __future__ import annotations

import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from talentscout.logging_utils import structured_log
from talentscout.services.github.cascade import Strategy, resolve, select_all, selector_text
from talentscout.services.github.parser_utils import (
    build_absolute_github_url,
    is_github_username,
    node_text,
    username_from_href,
)
from talentscout.services.github.source import build_profile_url
from talentscout.services.github.types import Candidate

logger = logging.getLogger(__name__)

SEARCH_ROW_SELECTORS: tuple[str, ...] = (
    "div.iwUbcA",
    "div.ldRxiI",
    'div[data-testid="results-list"] > div',
    ".user-list-item",
    ".Box-row",
    ".search-result-item",
    ".user-list > li",
    ".list-item",
    '[data-hovercard-type="user"]',
)


@dataclass(frozen=True)
class UserLink:
    username: str
    href: str | None


def _styled_username_with_last_link(row: Tag) -> UserLink | None:
    username = node_text(row.select_one("span.gbmbF"))
    if not is_github_username(username):
        return None
    links = row.select("a.prc-Link-Link-85e08[href]") or row.select("a[href]")
    href = links[-1].get("href") if links else None
    return UserLink(username=username, href=href)


def _first_profile_link(row: Tag) -> UserLink | None:
    for link in row.select("a[href]"):
        username = username_from_href(link.get("href"))
        text = node_text(link)
        if username and text == username:
            return UserLink(username=username, href=link.get("href"))
    return None


def _link_strategy(selector: str) -> Strategy[UserLink]:
    def _strategy(row: Tag) -> UserLink | None:
        link = row.select_one(selector)
        if link is None:
            return None
        username = node_text(link)
        if not is_github_username(username):
            username = username_from_href(link.get("href")) or ""
        if not username:
            return None
        return UserLink(username=username, href=link.get("href"))

    return _strategy


def _row_is_link(row: Tag) -> UserLink | None:
    if row.name != "a":
        return None
    username = username_from_href(row.get("href"))
    if username is None:
        return None
    return UserLink(username=username, href=row.get("href"))


SEARCH_FIELD_CASCADES: dict[str, tuple[Strategy[object], ...]] = {
    "user_link": (
        _styled_username_with_last_link,
        _first_profile_link,
        _link_strategy('a.text-bold[href*="/"]'),
        _link_strategy("a.mr-1"),
        _link_strategy('a[data-hovercard-type="user"]'),
        _row_is_link,
    ),
    "display_name": (
        selector_text("span.hYFqef"),
        selector_text("p.text-gray"),
        selector_text(".color-fg-muted"),
    ),
    "bio": (
        selector_text("span.gKFdvh"),
        selector_text("p.mb-1"),
    ),
}


def _profile_url(link: UserLink) -> str:
    absolute = build_absolute_github_url(link.href)
    if absolute and username_from_href(absolute) == link.username:
        return absolute
    return build_profile_url(link.username)


def parse_search_row(row: Tag) -> Candidate | None:
    link = resolve("user_link", SEARCH_FIELD_CASCADES["user_link"], row)
    if not isinstance(link, UserLink):
        return None
    display_name = resolve("display_name", SEARCH_FIELD_CASCADES["display_name"], row)
    bio = resolve("bio", SEARCH_FIELD_CASCADES["bio"], row)
    return Candidate(
        username=link.username,
        profile_url=_profile_url(link),
        display_name=display_name,
        bio=bio,
    )


def parse_search_rows(soup: BeautifulSoup) -> list[Candidate]:
    selector, rows = select_all(soup, SEARCH_ROW_SELECTORS)
    if selector is None:
        structured_log(
            logger,
            "warning",
            "github_parser.search_rows_not_found",
            tried_selectors=len(SEARCH_ROW_SELECTORS),
            link_count=len(soup.select("a[href]")),
        )
        return []

    structured_log(
        logger,
        "debug",
        "github_parser.search_rows_selected",
        selector=selector,
        row_count=len(rows),
    )
    candidates: list[Candidate] = []
    for row in rows:
        candidate = parse_search_row(row)
        if candidate is not None:
            candidates.append(candidate)
    return candidates
