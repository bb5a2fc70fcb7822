from __future__ import annotations

from dataclasses import dataclass, field

from bs4 import BeautifulSoup

from talentscout.services.github.profile_rows import (
    parse_pinned_repositories,
    parse_profile_fields,
)
from talentscout.services.github.search_rows import parse_search_rows
from talentscout.services.github.state_detection import detect_page_warnings, is_blocked
from talentscout.services.github.types import Candidate, ProfileRecord

HTML_PARSER = "html.parser"


@dataclass(frozen=True)
class ParsedSearchPage:
    candidates: list[Candidate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_blocked(self) -> bool:
        return is_blocked(self.warnings)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", HTML_PARSER)


def extract_search_results(html: str) -> list[Candidate]:
    return parse_search_rows(_soup(html))


def parse_search_page(html: str) -> ParsedSearchPage:
    return ParsedSearchPage(
        candidates=extract_search_results(html),
        warnings=detect_page_warnings(html or ""),
    )


def extract_profile(html: str, candidate: Candidate) -> ProfileRecord:
    soup = _soup(html)
    fields = parse_profile_fields(soup)
    return ProfileRecord(
        username=candidate.username,
        profile_url=candidate.profile_url,
        display_name=candidate.display_name,
        bio=candidate.bio,
        contribution_count=fields["contribution_count"],
        pinned_repositories=parse_pinned_repositories(soup),
        followers=fields["followers"],
        following=fields["following"],
        organizations=fields["organizations"],
        profile_readme=fields["profile_readme"],
        location=fields["location"],
    )
