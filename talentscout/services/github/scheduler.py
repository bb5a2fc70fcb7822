from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from talentscout.logging_utils import structured_log
from talentscout.services.github.cache import (
    ResultCache,
    profile_cache_key,
    search_page_cache_key,
)
from talentscout.services.github.parser import extract_profile, parse_search_page
from talentscout.services.github.source import GithubSource, build_search_url
from talentscout.services.github.state_detection import detect_page_warnings, is_blocked
from talentscout.services.github.types import Candidate, ProfileRecord
from talentscout.settings import settings

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]
CachedValue = list[Candidate] | ProfileRecord


def partition_batches(items: Sequence[Candidate], batch_size: int) -> list[list[Candidate]]:
    size = max(int(batch_size), 1)
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


def dedupe_candidates(candidates: Sequence[Candidate]) -> list[Candidate]:
    seen: set[str] = set()
    unique: list[Candidate] = []
    for candidate in candidates:
        key = candidate.username.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)
    return unique


class FetchScheduler:
    def __init__(
        self,
        *,
        source: GithubSource,
        cache: ResultCache[CachedValue] | None = None,
        batch_size: int | None = None,
        batch_delay_seconds: float | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._source = source
        self._cache: ResultCache[CachedValue] = cache if cache is not None else ResultCache()
        configured_batch_size = settings.github_profile_batch_size if batch_size is None else batch_size
        self._batch_size = max(int(configured_batch_size), 1)
        configured_delay = settings.github_batch_delay_seconds if batch_delay_seconds is None else batch_delay_seconds
        self._batch_delay_seconds = max(float(configured_delay), 0.0)
        self._sleep = sleep

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def cache(self) -> ResultCache[CachedValue]:
        return self._cache

    async def fetch_candidates(self, query: str, pages: int) -> list[Candidate]:
        page_numbers = list(range(1, int(pages) + 1))
        page_results = await asyncio.gather(*(self._fetch_search_page(query, page) for page in page_numbers))

        flattened: list[Candidate] = []
        for page, candidates in zip(page_numbers, page_results):
            if not candidates:
                structured_log(logger, "warning", "fetch_scheduler.search_page_empty", query=query, page=page)
            flattened.extend(candidates)

        unique = dedupe_candidates(flattened)
        structured_log(
            logger,
            "info",
            "fetch_scheduler.candidates_collected",
            query=query,
            pages=len(page_numbers),
            candidate_count=len(unique),
            duplicate_count=len(flattened) - len(unique),
        )
        return unique

    async def fetch_profiles(self, candidates: Sequence[Candidate]) -> list[ProfileRecord]:
        batches = partition_batches(candidates, self._batch_size)
        profiles: list[ProfileRecord] = []
        for batch_index, batch in enumerate(batches):
            batch_results = await asyncio.gather(*(self._fetch_profile(candidate) for candidate in batch))
            profiles.extend(batch_results)
            structured_log(
                logger,
                "info",
                "fetch_scheduler.batch_completed",
                batch_index=batch_index,
                batch_count=len(batches),
                batch_size=len(batch),
                failed_count=sum(1 for profile in batch_results if profile.error is not None),
            )
            if batch_index < len(batches) - 1 and self._batch_delay_seconds > 0:
                await self._sleep(self._batch_delay_seconds)
        return profiles

    async def _fetch_search_page(self, query: str, page: int) -> list[Candidate]:
        cache_key = search_page_cache_key(query=query, page=page)
        cached = self._cache.get(cache_key)
        if isinstance(cached, list):
            structured_log(logger, "debug", "fetch_scheduler.cache_hit", cache_key=cache_key)
            return list(cached)

        result = await self._source.fetch(build_search_url(query=query, page=page))
        if not result.ok:
            structured_log(
                logger,
                "warning",
                "fetch_scheduler.search_page_failed",
                query=query,
                page=page,
                error=result.error,
            )
            return []

        try:
            parsed = parse_search_page(result.body)
        except Exception:
            logger.exception(
                "fetch_scheduler.search_page_extraction_failed",
                extra={"query": query, "page": page},
            )
            return []

        if parsed.warnings:
            structured_log(
                logger,
                "warning" if parsed.is_blocked else "info",
                "fetch_scheduler.search_page_warnings",
                query=query,
                page=page,
                warnings=parsed.warnings,
            )
        if not parsed.is_blocked:
            self._cache.put(cache_key, list(parsed.candidates))
        return list(parsed.candidates)

    async def _fetch_profile(self, candidate: Candidate) -> ProfileRecord:
        cache_key = profile_cache_key(candidate.username)
        cached = self._cache.get(cache_key)
        if isinstance(cached, ProfileRecord):
            structured_log(logger, "debug", "fetch_scheduler.cache_hit", cache_key=cache_key)
            return cached

        result = await self._source.fetch(candidate.profile_url)
        if not result.ok:
            structured_log(
                logger,
                "warning",
                "fetch_scheduler.profile_failed",
                username=candidate.username,
                error=result.error,
            )
            return ProfileRecord.from_candidate(candidate, error=result.error)

        try:
            profile = extract_profile(result.body, candidate)
        except Exception as exc:
            logger.exception(
                "fetch_scheduler.profile_extraction_failed",
                extra={"username": candidate.username},
            )
            return ProfileRecord.from_candidate(candidate, error=f"extraction_failed: {exc}")

        warnings = detect_page_warnings(result.body)
        if is_blocked(warnings):
            structured_log(
                logger,
                "warning",
                "fetch_scheduler.profile_page_blocked",
                username=candidate.username,
                warnings=warnings,
            )
        else:
            self._cache.put(cache_key, profile)
        return profile
