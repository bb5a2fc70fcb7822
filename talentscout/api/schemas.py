from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ApiMeta(BaseModel):
    request_id: str | None = None

    model_config = ConfigDict(extra="forbid")


class ApiErrorData(BaseModel):
    code: str
    message: str
    details: Any | None = None

    model_config = ConfigDict(extra="forbid")


class ApiErrorEnvelope(BaseModel):
    error: ApiErrorData
    meta: ApiMeta

    model_config = ConfigDict(extra="forbid")


class UserSearchData(BaseModel):
    request_id: str | None
    query: str
    count: int
    # Profile records keep their loosely-shaped raw_data and ai_insights maps.
    results: list[dict[str, Any]]

    model_config = ConfigDict(extra="forbid")


class UserSearchEnvelope(BaseModel):
    data: UserSearchData
    meta: ApiMeta

    model_config = ConfigDict(extra="forbid")


class SearchRequestItem(BaseModel):
    id: str
    query: str
    pages: int
    timestamp: str
    status: str
    completed_at: str | None = None
    result_count: int | None = None

    model_config = ConfigDict(extra="ignore")


class SearchRequestListData(BaseModel):
    requests: list[SearchRequestItem]

    model_config = ConfigDict(extra="forbid")


class SearchRequestListEnvelope(BaseModel):
    data: SearchRequestListData
    meta: ApiMeta

    model_config = ConfigDict(extra="forbid")
