from __future__ import annotations

from talentscout.services.enrichment.application import ProfileEnricher
from talentscout.services.enrichment.gemini import GeminiClient
from talentscout.services.enrichment.queue import EnrichmentQueue
from talentscout.services.github.cache import ResultCache
from talentscout.services.github.scheduler import CachedValue, FetchScheduler
from talentscout.services.github.source import LiveGithubSource
from talentscout.services.history.store import JsonHistoryStore
from talentscout.services.search.application import ProfileSearchService

_search_service: ProfileSearchService | None = None
_enrichment_queue: EnrichmentQueue | None = None
_history_store: JsonHistoryStore | None = None


def get_enrichment_queue() -> EnrichmentQueue:
    global _enrichment_queue
    if _enrichment_queue is None:
        _enrichment_queue = EnrichmentQueue(request_fn=GeminiClient().generate)
    return _enrichment_queue


def get_history_store() -> JsonHistoryStore:
    global _history_store
    if _history_store is None:
        _history_store = JsonHistoryStore()
    return _history_store


def get_search_service() -> ProfileSearchService:
    global _search_service
    if _search_service is None:
        source = LiveGithubSource()
        _search_service = ProfileSearchService(
            source=source,
            scheduler=FetchScheduler(source=source, cache=ResultCache[CachedValue]()),
            enricher=ProfileEnricher(queue=get_enrichment_queue()),
            history=get_history_store(),
        )
    return _search_service


async def shutdown_runtime() -> None:
    global _search_service, _enrichment_queue
    if _enrichment_queue is not None:
        await _enrichment_queue.close()
    _enrichment_queue = None
    _search_service = None
