from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from talentscout.services.enrichment.types import Insight, InsightError

UNKNOWN_REPOSITORY_NAME = "Unknown Repository"


@dataclass(frozen=True)
class Candidate:
    username: str
    profile_url: str
    display_name: str | None = None
    bio: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "profile_url": self.profile_url,
            "display_name": self.display_name,
            "bio": self.bio,
        }


@dataclass(frozen=True)
class PinnedRepository:
    name: str = UNKNOWN_REPOSITORY_NAME
    description: str | None = None
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "language": self.language,
        }


@dataclass(frozen=True)
class ProfileRecord:
    username: str
    profile_url: str
    display_name: str | None = None
    bio: str | None = None
    contribution_count: int = 0
    pinned_repositories: tuple[PinnedRepository, ...] = field(default_factory=tuple)
    followers: int = 0
    following: int = 0
    organizations: tuple[str, ...] = field(default_factory=tuple)
    profile_readme: str | None = None
    location: str | None = None
    error: str | None = None
    insights: Insight | InsightError | None = None

    @classmethod
    def from_candidate(cls, candidate: Candidate, *, error: str | None = None) -> ProfileRecord:
        return cls(
            username=candidate.username,
            profile_url=candidate.profile_url,
            display_name=candidate.display_name,
            bio=candidate.bio,
            error=error,
        )

    @property
    def candidate(self) -> Candidate:
        return Candidate(
            username=self.username,
            profile_url=self.profile_url,
            display_name=self.display_name,
            bio=self.bio,
        )

    def with_insights(self, insights: Insight | InsightError) -> ProfileRecord:
        return replace(self, insights=insights)

    def to_dict(self) -> dict[str, Any]:
        payload = self.candidate.to_dict()
        if self.error is not None:
            payload["raw_data"] = {"error": self.error}
        else:
            payload["contribution_count"] = self.contribution_count
            payload["pinned_repositories"] = [repo.to_dict() for repo in self.pinned_repositories]
            payload["raw_data"] = {
                "followers": self.followers,
                "following": self.following,
                "organizations": list(self.organizations),
                "profile_readme": self.profile_readme,
                "location": self.location,
            }
        payload["ai_insights"] = self.insights.to_dict() if self.insights is not None else {}
        return payload
