from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from talentscout.logging_utils import structured_log
from talentscout.services.github.cascade import Strategy, resolve_table, select_all, selector_text
from talentscout.services.github.parser_utils import (
    digits_only,
    first_count,
    node_text,
    select_text,
    unique_in_order,
)
from talentscout.services.github.types import UNKNOWN_REPOSITORY_NAME, PinnedRepository

logger = logging.getLogger(__name__)

PINNED_ITEM_SELECTORS: tuple[str, ...] = (
    "div.pinned-item-list-item",
    "div.js-pinned-item-list-item",
    "ol.d-flex > li",
)


def _contribution_heading_text(root: Tag) -> str | None:
    for heading in root.select("h2"):
        text = node_text(heading)
        if "contribution" in text.lower() and any(char.isdigit() for char in text):
            return text
    return None


def _yearly_contributions_text(root: Tag) -> str | None:
    text = select_text(root, ".js-yearly-contributions")
    if not any(char.isdigit() for char in text):
        return None
    return text


def _tab_link_text(selector: str) -> Strategy[str]:
    def _strategy(root: Tag) -> str | None:
        text = select_text(root, selector)
        if not any(char.isdigit() for char in text):
            return None
        return text

    return _strategy


def _organization_names(selector: str) -> Strategy[tuple[str, ...]]:
    def _strategy(root: Tag) -> tuple[str, ...] | None:
        names: list[str] = []
        for element in root.select(selector):
            label = element.get("aria-label") or ""
            if not label:
                avatar = element.select_one("img[alt]")
                label = avatar.get("alt", "") if avatar is not None else ""
            names.append(" ".join(str(label).split()) or node_text(element))
        return unique_in_order(names) or None

    return _strategy


def _description_first_line(root: Tag) -> str | None:
    node = root.select_one(".color-fg-muted")
    if node is None:
        return None
    for line in node.get_text("\n").splitlines():
        stripped = " ".join(line.split())
        if stripped:
            return stripped
    return None


def _language_after_color_swatch(root: Tag) -> str | None:
    swatch = root.select_one(".repo-language-color")
    if swatch is None:
        return None
    sibling = swatch.find_next_sibling()
    return node_text(sibling) or None


PROFILE_FIELD_CASCADES: dict[str, tuple[Strategy[object], ...]] = {
    "contribution_count": (
        _contribution_heading_text,
        _yearly_contributions_text,
    ),
    "followers": (
        _tab_link_text('a[href$="?tab=followers"]'),
        _tab_link_text('a[href*="followers"]'),
    ),
    "following": (
        _tab_link_text('a[href$="?tab=following"]'),
        _tab_link_text('a[href*="following"]'),
    ),
    "organizations": (
        _organization_names('a[data-hovercard-type="organization"]'),
        _organization_names(".avatar-group-item"),
    ),
    "profile_readme": (
        selector_text("div.js-user-profile-bio"),
        selector_text(".user-profile-bio"),
        selector_text('div[itemprop="description"]'),
        selector_text("article.markdown-body"),
    ),
    "location": (
        selector_text('[itemprop="homeLocation"]'),
        selector_text('li[aria-label^="Home location"]'),
    ),
}

PINNED_FIELD_CASCADES: dict[str, tuple[Strategy[object], ...]] = {
    "name": (
        selector_text("span.repo"),
        selector_text('a[itemprop="name codeRepository"]'),
        selector_text(".repo"),
    ),
    "description": (
        selector_text("p.pinned-item-desc"),
        _description_first_line,
    ),
    "language": (
        selector_text('span[itemprop="programmingLanguage"]'),
        _language_after_color_swatch,
    ),
}


def parse_pinned_repository(item: Tag) -> PinnedRepository:
    values = resolve_table(PINNED_FIELD_CASCADES, item)
    return PinnedRepository(
        name=values["name"] or UNKNOWN_REPOSITORY_NAME,
        description=values["description"],
        language=values["language"],
    )


def parse_pinned_repositories(soup: BeautifulSoup) -> tuple[PinnedRepository, ...]:
    selector, items = select_all(soup, PINNED_ITEM_SELECTORS)
    if selector is None:
        return ()
    structured_log(
        logger,
        "debug",
        "github_parser.pinned_items_selected",
        selector=selector,
        item_count=len(items),
    )
    return tuple(parse_pinned_repository(item) for item in items)


def parse_profile_fields(soup: BeautifulSoup) -> dict[str, object]:
    values = resolve_table(PROFILE_FIELD_CASCADES, soup)
    return {
        "contribution_count": first_count(values["contribution_count"]),
        "followers": digits_only(values["followers"]),
        "following": digits_only(values["following"]),
        "organizations": values["organizations"] or (),
        "profile_readme": values["profile_readme"],
        "location": values["location"],
    }
