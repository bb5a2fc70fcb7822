from __future__ import annotations

import json
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from talentscout.api.runtime_deps import get_history_store, get_search_service
from talentscout.main import app
from talentscout.services.enrichment.application import ProfileEnricher
from talentscout.services.enrichment.queue import EnrichmentQueue
from talentscout.services.github.scheduler import FetchScheduler
from talentscout.services.github.source import build_profile_url, build_search_url
from talentscout.services.history.store import JsonHistoryStore
from talentscout.services.search.application import ProfileSearchService
from tests.helpers import StubGithubSource, profile_page_html, search_page_html


async def _no_sleep(_seconds: float) -> None:
    return None


async def _generate(prompt: str) -> str:
    return json.dumps({"primary_skills": "Rust", "experience_level": "advanced"})


@pytest.fixture
def history(tmp_path) -> JsonHistoryStore:
    return JsonHistoryStore(tmp_path)


@pytest.fixture
def client(history: JsonHistoryStore, override_settings) -> Iterator[TestClient]:
    override_settings(github_default_query="rust developer", github_default_pages=1, github_max_pages=5)
    source = StubGithubSource(
        {
            build_search_url(query="rust developer", page=1): search_page_html(["ana", "ben"]),
            build_profile_url("ana"): profile_page_html(followers="21", location="Oslo"),
            build_profile_url("ben"): profile_page_html(),
        }
    )

    def _search_service() -> ProfileSearchService:
        queue = EnrichmentQueue(request_fn=_generate, min_dispatch_interval_seconds=0, sleep=_no_sleep)
        return ProfileSearchService(
            source=source,
            scheduler=FetchScheduler(source=source, batch_delay_seconds=0, sleep=_no_sleep),
            enricher=ProfileEnricher(queue=queue, enabled=True),
            history=history,
        )

    app.dependency_overrides[get_search_service] = _search_service
    app.dependency_overrides[get_history_store] = lambda: history
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_search_service, None)
        app.dependency_overrides.pop(get_history_store, None)


def test_api_search_users_returns_enriched_profiles(client: TestClient) -> None:
    response = client.get(
        "/api/v1/github/users",
        params={"query": "rust developer", "pages": 1},
        headers={"X-Request-ID": "req-search"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["meta"] == {"request_id": "req-search"}
    data = body["data"]
    assert data["query"] == "rust developer"
    assert data["count"] == 2
    assert len(data["request_id"]) == 32
    ana = data["results"][0]
    assert ana["username"] == "ana"
    assert ana["profile_url"] == "https://github.com/ana"
    assert ana["raw_data"]["followers"] == 21
    assert ana["raw_data"]["location"] == "Oslo"
    assert ana["pinned_repositories"] == []
    assert ana["ai_insights"]["primary_skills"] == "Rust"


def test_api_search_users_uses_configured_defaults(client: TestClient) -> None:
    response = client.get("/api/v1/github/users")

    assert response.status_code == 200
    assert response.json()["data"]["query"] == "rust developer"


@pytest.mark.parametrize(
    "params",
    [
        {"query": "   ", "pages": 1},
        {"query": "go", "pages": 0},
        {"query": "go", "pages": 6},
        {"query": "go", "pages": "many"},
    ],
)
def test_api_search_users_rejects_invalid_input(client: TestClient, params: dict) -> None:
    response = client.get("/api/v1/github/users", params=params)

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "invalid_search_request"
    assert "request_id" in body["meta"]


def test_api_lists_search_request_history(client: TestClient, history: JsonHistoryStore) -> None:
    client.get("/api/v1/github/users", params={"query": "rust developer", "pages": 1})

    response = client.get("/api/v1/github/requests")

    assert response.status_code == 200
    [request] = response.json()["data"]["requests"]
    assert request["query"] == "rust developer"
    assert request["pages"] == 1
    assert request["status"] == "completed"
    assert request["result_count"] == 2
    assert history.list_results()[0]["count"] == 2


def test_api_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/v1/github/nope")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_api_wrong_method_uses_error_envelope_with_request_id(client: TestClient) -> None:
    response = client.post("/api/v1/github/users", headers={"X-Request-ID": "rid-405"})

    assert response.status_code == 405
    body = response.json()
    assert body["error"]["code"] == "method_not_allowed"
    assert body["meta"]["request_id"] == "rid-405"
    assert response.headers["X-Request-ID"] == "rid-405"
