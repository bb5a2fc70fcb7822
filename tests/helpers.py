from __future__ import annotations

from collections.abc import Iterable, Mapping

from talentscout.services.github.source import FetchResult


def search_row_html(username: str, *, display_name: str | None = None, bio: str | None = None) -> str:
    parts = [f'<div class="Box-row"><a class="mr-1" href="/{username}">{username}</a>']
    if display_name:
        parts.append(f'<p class="text-gray">{display_name}</p>')
    if bio:
        parts.append(f'<p class="mb-1">{bio}</p>')
    parts.append("</div>")
    return "".join(parts)


def search_page_html(usernames: Iterable[str]) -> str:
    rows = "".join(search_row_html(username) for username in usernames)
    return f"<html><body><div class='user-list-wrapper'>{rows}</div></body></html>"


def profile_page_html(
    *,
    contributions: str = "1,234 contributions in the last year",
    followers: str = "12",
    following: str = "3",
    organizations: Iterable[str] = (),
    readme: str | None = None,
    location: str | None = None,
    pinned: Iterable[Mapping[str, str]] = (),
) -> str:
    orgs = "".join(
        f'<a data-hovercard-type="organization" aria-label="{name}" href="/{name}">'
        f'<img alt="@{name}"></a>'
        for name in organizations
    )
    pinned_items = "".join(
        '<div class="pinned-item-list-item">'
        f'<span class="repo">{item.get("name", "")}</span>'
        f'<p class="pinned-item-desc">{item.get("description", "")}</p>'
        f'<span itemprop="programmingLanguage">{item.get("language", "")}</span>'
        "</div>"
        for item in pinned
    )
    readme_html = f'<article class="markdown-body">{readme}</article>' if readme else ""
    location_html = f'<span itemprop="homeLocation">{location}</span>' if location else ""
    return (
        "<html><body>"
        f"<h2>{contributions}</h2>"
        f'<a href="https://github.com/someone?tab=followers"><span>{followers}</span> followers</a>'
        f'<a href="https://github.com/someone?tab=following"><span>{following}</span> following</a>'
        f"{orgs}{location_html}{readme_html}{pinned_items}"
        "</body></html>"
    )


class StubGithubSource:
    """Serves canned bodies by URL; unknown URLs fail like a transport error."""

    def __init__(self, pages: Mapping[str, str] | None = None, *, reachable: bool = True) -> None:
        self.pages = dict(pages or {})
        self.reachable = reachable
        self.fetched: list[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.fetched.append(url)
        body = self.pages.get(url)
        if body is None:
            return FetchResult(
                requested_url=url,
                status_code=None,
                final_url=None,
                body="",
                error="ConnectError",
            )
        return FetchResult(
            requested_url=url,
            status_code=200,
            final_url=url,
            body=body,
            error=None,
        )

    async def check_connectivity(self) -> bool:
        return self.reachable
