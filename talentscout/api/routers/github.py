from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request

from talentscout.api.responses import success_payload
from talentscout.api.runtime_deps import get_history_store, get_search_service
from talentscout.api.schemas import SearchRequestListEnvelope, UserSearchEnvelope
from talentscout.logging_utils import structured_log
from talentscout.services.history.store import JsonHistoryStore
from talentscout.services.search.application import ProfileSearchService
from talentscout.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/github", tags=["api-github"])


@router.get(
    "/users",
    response_model=UserSearchEnvelope,
)
async def search_users(
    request: Request,
    query: str | None = Query(default=None, max_length=256),
    pages: int | None = Query(default=None),
    search_service: ProfileSearchService = Depends(get_search_service),
):
    effective_query = settings.github_default_query if query is None else query
    effective_pages = settings.github_default_pages if pages is None else pages
    structured_log(
        logger,
        "info",
        "api.github_users_requested",
        query=effective_query,
        pages=effective_pages,
    )
    data = await search_service.search_and_record(effective_query, effective_pages)
    return success_payload(request, data=data)


@router.get(
    "/requests",
    response_model=SearchRequestListEnvelope,
)
async def list_search_requests(
    request: Request,
    history: JsonHistoryStore = Depends(get_history_store),
):
    return success_payload(
        request,
        data={"requests": history.list_requests()},
    )
