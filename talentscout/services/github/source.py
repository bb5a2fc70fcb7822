from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote, urlencode

import httpx

from talentscout.logging_utils import structured_log
from talentscout.settings import settings

logger = logging.getLogger(__name__)

ERROR_EMPTY_RESPONSE = "empty_response"
ERROR_TIMEOUT = "timeout"


@dataclass(frozen=True)
class FetchResult:
    requested_url: str
    status_code: int | None
    final_url: str | None
    body: str
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


class GithubSource(Protocol):
    async def fetch(self, url: str) -> FetchResult: ...

    async def check_connectivity(self) -> bool: ...


class LiveGithubSource:
    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        configured_timeout = settings.github_http_timeout_seconds if timeout_seconds is None else timeout_seconds
        self._timeout_seconds = max(float(configured_timeout), 0.5)
        self._user_agent = (user_agent or settings.github_http_user_agent).strip()
        self._accept_language = settings.github_http_accept_language.strip() or "en-US,en;q=0.5"
        self._transport = transport

    def _request_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": self._accept_language,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout_seconds,
            follow_redirects=True,
            headers=self._request_headers(),
            transport=self._transport,
        )

    async def fetch(self, url: str) -> FetchResult:
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            return self._network_error_result(url, ERROR_TIMEOUT, exc)
        except httpx.HTTPError as exc:
            return self._network_error_result(url, str(exc) or type(exc).__name__, exc)

        if response.status_code >= 400:
            return self._http_error_result(url, response)
        if not response.text.strip():
            structured_log(
                logger,
                "warning",
                "github_source.fetch_empty_response",
                requested_url=url,
                status_code=response.status_code,
            )
            return FetchResult(
                requested_url=url,
                status_code=response.status_code,
                final_url=str(response.url),
                body="",
                error=ERROR_EMPTY_RESPONSE,
            )
        structured_log(
            logger,
            "debug",
            "github_source.fetch_succeeded",
            requested_url=url,
            status_code=response.status_code,
            body_bytes=len(response.content),
        )
        return FetchResult(
            requested_url=url,
            status_code=response.status_code,
            final_url=str(response.url),
            body=response.text,
            error=None,
        )

    async def check_connectivity(self) -> bool:
        result = await self.fetch(build_root_url())
        structured_log(
            logger,
            "info" if result.ok else "error",
            "github_source.connectivity_checked",
            reachable=result.ok,
            error=result.error,
        )
        return result.ok

    @staticmethod
    def _http_error_reason(*, status_code: int, body: str) -> str:
        lowered_body = body.lower()
        if status_code == 429:
            return "blocked_http_429_rate_limited"
        if "abuse detection" in lowered_body or "secondary rate limit" in lowered_body:
            return "blocked_abuse_detection"
        return f"http_error_status_{status_code}"

    @staticmethod
    def _network_error_result(url: str, error: str, exc: httpx.HTTPError) -> FetchResult:
        structured_log(
            logger,
            "warning",
            "github_source.fetch_network_error",
            requested_url=url,
            error=error,
            error_type=type(exc).__name__,
        )
        return FetchResult(
            requested_url=url,
            status_code=None,
            final_url=None,
            body="",
            error=error,
        )

    @staticmethod
    def _http_error_result(url: str, response: httpx.Response) -> FetchResult:
        reason = LiveGithubSource._http_error_reason(
            status_code=response.status_code,
            body=response.text,
        )
        structured_log(
            logger,
            "warning",
            "github_source.fetch_http_error",
            requested_url=url,
            status_code=response.status_code,
            final_url=str(response.url),
            block_reason=reason,
        )
        return FetchResult(
            requested_url=url,
            status_code=response.status_code,
            final_url=str(response.url),
            body=response.text,
            error=reason,
        )


def _base_url() -> str:
    return settings.github_base_url.rstrip("/")


def build_root_url() -> str:
    return f"{_base_url()}/"


def build_search_url(*, query: str, page: int) -> str:
    params = {"q": query, "type": "users", "p": int(page)}
    return f"{_base_url()}/search?{urlencode(params, quote_via=quote)}"


def build_profile_url(username: str) -> str:
    return f"{_base_url()}/{quote(username, safe='')}"
