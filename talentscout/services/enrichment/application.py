from __future__ import annotations

import logging

from talentscout.logging_utils import structured_log
from talentscout.services.enrichment.errors import EnrichmentQueueClosedError, GenerationError
from talentscout.services.enrichment.prompt import build_prompt
from talentscout.services.enrichment.queue import EnrichmentQueue
from talentscout.services.enrichment.response_parser import parse_insight_response
from talentscout.services.enrichment.types import Insight, InsightError
from talentscout.services.github.types import ProfileRecord
from talentscout.settings import settings

logger = logging.getLogger(__name__)

ENRICHMENT_DISABLED = "enrichment_disabled"


class ProfileEnricher:
    def __init__(self, *, queue: EnrichmentQueue, enabled: bool | None = None) -> None:
        self._queue = queue
        self._enabled = settings.enrichment_enabled if enabled is None else bool(enabled)

    @property
    def queue(self) -> EnrichmentQueue:
        return self._queue

    async def enrich(self, profile: ProfileRecord) -> Insight | InsightError:
        """Submit one profile to the queue and parse what comes back.

        Generation failures become an ``InsightError`` so one bad profile
        never aborts a search.
        """
        if not self._enabled:
            return InsightError(error=ENRICHMENT_DISABLED)
        try:
            text = await self._queue.generate(build_prompt(profile))
        except (GenerationError, EnrichmentQueueClosedError) as exc:
            structured_log(
                logger,
                "warning",
                "profile_enricher.generation_failed",
                username=profile.username,
                error=str(exc),
            )
            return InsightError(error=str(exc) or type(exc).__name__)
        except Exception as exc:
            logger.exception(
                "profile_enricher.unexpected_failure",
                extra={"username": profile.username},
            )
            return InsightError(error=f"unexpected_error: {type(exc).__name__}")
        return parse_insight_response(text)
