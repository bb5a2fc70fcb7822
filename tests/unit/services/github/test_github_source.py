from __future__ import annotations

import httpx
import pytest

from talentscout.services.github.source import (
    ERROR_EMPTY_RESPONSE,
    ERROR_TIMEOUT,
    LiveGithubSource,
    build_profile_url,
    build_root_url,
    build_search_url,
)


def test_build_search_url_encodes_query_and_page() -> None:
    url = build_search_url(query="rust developer", page=2)

    assert url == "https://github.com/search?q=rust%20developer&type=users&p=2"


def test_build_profile_and_root_urls() -> None:
    assert build_profile_url("alice") == "https://github.com/alice"
    assert build_root_url() == "https://github.com/"


def test_build_urls_follow_configured_base(override_settings) -> None:
    override_settings(github_base_url="https://github.example.test/")

    assert build_profile_url("bob") == "https://github.example.test/bob"
    assert build_search_url(query="go", page=1).startswith("https://github.example.test/search?")


@pytest.mark.asyncio
async def test_fetch_returns_body_and_sends_browser_headers() -> None:
    seen_headers: list[httpx.Headers] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen_headers.append(request.headers)
        return httpx.Response(200, text="<html>ok</html>")

    source = LiveGithubSource(user_agent="talentscout-tests", transport=httpx.MockTransport(_handler))
    result = await source.fetch("https://github.com/alice")

    assert result.ok
    assert result.status_code == 200
    assert result.body == "<html>ok</html>"
    assert seen_headers[0]["user-agent"] == "talentscout-tests"
    assert seen_headers[0]["accept-language"] == "en-US,en;q=0.5"


@pytest.mark.asyncio
async def test_fetch_maps_timeout_to_failed_result() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    source = LiveGithubSource(transport=httpx.MockTransport(_handler))
    result = await source.fetch("https://github.com/alice")

    assert not result.ok
    assert result.error == ERROR_TIMEOUT
    assert result.status_code is None
    assert result.body == ""


@pytest.mark.asyncio
async def test_fetch_maps_connect_error_to_failed_result() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source = LiveGithubSource(transport=httpx.MockTransport(_handler))
    result = await source.fetch("https://github.com/alice")

    assert not result.ok
    assert result.error == "connection refused"


@pytest.mark.asyncio
async def test_fetch_reports_rate_limit_status() -> None:
    source = LiveGithubSource(
        transport=httpx.MockTransport(lambda request: httpx.Response(429, text="slow down")),
    )

    result = await source.fetch("https://github.com/search?q=x")

    assert result.error == "blocked_http_429_rate_limited"
    assert result.status_code == 429


@pytest.mark.asyncio
async def test_fetch_reports_empty_body() -> None:
    source = LiveGithubSource(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="   ")),
    )

    result = await source.fetch("https://github.com/alice")

    assert result.error == ERROR_EMPTY_RESPONSE


def test_http_error_reason_detects_abuse_detection_pages() -> None:
    reason = LiveGithubSource._http_error_reason(
        status_code=403,
        body="You have triggered an abuse detection mechanism.",
    )

    assert reason == "blocked_abuse_detection"
    assert LiveGithubSource._http_error_reason(status_code=503, body="") == "http_error_status_503"


@pytest.mark.asyncio
async def test_check_connectivity_fetches_site_root() -> None:
    requested: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text="<html>home</html>")

    source = LiveGithubSource(transport=httpx.MockTransport(_handler))

    assert await source.check_connectivity() is True
    assert requested == ["https://github.com/"]
