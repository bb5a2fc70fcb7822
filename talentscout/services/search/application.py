from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from talentscout.logging_utils import structured_log
from talentscout.services.enrichment.application import ProfileEnricher
from talentscout.services.github.scheduler import FetchScheduler
from talentscout.services.github.source import GithubSource
from talentscout.services.github.types import ProfileRecord
from talentscout.services.history.store import JsonHistoryStore
from talentscout.services.search.errors import SearchValidationError
from talentscout.settings import settings

logger = logging.getLogger(__name__)

WARNING_GITHUB_UNREACHABLE = "github_unreachable"


@dataclass(frozen=True)
class SearchResultSet:
    query: str
    pages: int
    results: list[ProfileRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.results)


def validate_search_input(query: str | None, pages: int) -> tuple[str, int]:
    normalized_query = (query or "").strip()
    if not normalized_query:
        raise SearchValidationError("query must not be empty", field="query")
    max_pages = max(int(settings.github_max_pages), 1)
    if not isinstance(pages, int) or isinstance(pages, bool) or pages < 1 or pages > max_pages:
        raise SearchValidationError(f"pages must be between 1 and {max_pages}", field="pages")
    return normalized_query, pages


class ProfileSearchService:
    def __init__(
        self,
        *,
        source: GithubSource,
        scheduler: FetchScheduler,
        enricher: ProfileEnricher,
        history: JsonHistoryStore | None = None,
        connectivity_check_enabled: bool | None = None,
    ) -> None:
        self._source = source
        self._scheduler = scheduler
        self._enricher = enricher
        self._history = history
        self._connectivity_check_enabled = (
            settings.github_connectivity_check_enabled
            if connectivity_check_enabled is None
            else bool(connectivity_check_enabled)
        )

    async def search(self, query: str, pages: int) -> SearchResultSet:
        """Run one query through fetch, extraction and enrichment.

        Raises ``SearchValidationError`` for bad input. Every later failure
        degrades a single page or profile and is reported inside the result.
        """
        query, pages = validate_search_input(query, pages)
        started = time.perf_counter()

        if self._connectivity_check_enabled and not await self._source.check_connectivity():
            structured_log(logger, "error", "profile_search.github_unreachable", query=query)
            return SearchResultSet(query=query, pages=pages, warnings=[WARNING_GITHUB_UNREACHABLE])

        candidates = await self._scheduler.fetch_candidates(query, pages)
        profiles = await self._scheduler.fetch_profiles(candidates)
        insights = await asyncio.gather(*(self._enricher.enrich(profile) for profile in profiles))
        results = [profile.with_insights(insight) for profile, insight in zip(profiles, insights)]

        structured_log(
            logger,
            "info",
            "profile_search.completed",
            query=query,
            pages=pages,
            candidate_count=len(candidates),
            result_count=len(results),
            failed_profile_count=sum(1 for profile in results if profile.error is not None),
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        return SearchResultSet(query=query, pages=pages, results=results)

    async def search_and_record(self, query: str, pages: int) -> dict[str, Any]:
        query, pages = validate_search_input(query, pages)
        request_id = self._history.record_request(query, pages) if self._history is not None else None
        result_set = await self.search(query, pages)
        payload = {
            "request_id": request_id,
            "query": result_set.query,
            "count": result_set.count,
            "results": [profile.to_dict() for profile in result_set.results],
        }
        if self._history is not None:
            self._history.record_result(payload)
        return payload
