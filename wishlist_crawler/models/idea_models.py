"""Models for crawled ideas: listing summaries, enriched ideas and the crawl result.

Field names are snake_case in Python; the serialization aliases reproduce the
camelCase document the webhook consumers expect.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StatusFilter(BaseModel):
    """One status category discovered in the portal's filter navigation."""

    model_config = ConfigDict(frozen=True)

    name: str
    id: str | None = Field(..., description="Value of the filter's toggle attribute")
    listing_url: str = Field(..., serialization_alias="url")


class IdeaSummary(BaseModel):
    """One idea card found on a listing page."""

    model_config = ConfigDict(frozen=True)

    name: str
    preview_text: str = Field(..., serialization_alias="preview")
    author_image: str = Field(..., serialization_alias="userImage")
    author_name: str = Field(..., serialization_alias="userName")
    created_date: str = Field(..., serialization_alias="date")
    category: str
    # Display strings, kept verbatim (e.g. "1.2k")
    vote_count: str = Field(..., serialization_alias="voteCount")
    comment_count: str = Field(..., serialization_alias="commentCount")
    status: str | None = None
    detail_url: str = Field(..., serialization_alias="url")


class IdeaContent(BaseModel):
    """Full description body read from an idea's detail page."""

    text: str
    html: str


class EnrichedIdea(IdeaSummary):
    """An idea summary with its detail-page content attached."""

    content_text: str | None = Field(default=None, serialization_alias="contentText")
    content_html: str | None = Field(default=None, serialization_alias="contentHtml")

    @classmethod
    def from_summary(
        cls, summary: IdeaSummary, content: IdeaContent | None = None
    ) -> "EnrichedIdea":
        """Build an enriched idea; without content the body fields stay None."""
        return cls(
            **summary.model_dump(),
            content_text=content.text if content else None,
            content_html=content.html if content else None,
        )


class StatusIdeas(StatusFilter):
    """A status filter together with the ideas listed under it."""

    ideas: list[EnrichedIdea] = Field(default_factory=list)

    @classmethod
    def from_status(
        cls, status: StatusFilter, ideas: list[EnrichedIdea]
    ) -> "StatusIdeas":
        return cls(**status.model_dump(), ideas=ideas)


class CrawlResult(BaseModel):
    """Aggregate of one crawl run, sent once to the destination."""

    ideas_by_status: list[StatusIdeas] = Field(
        default_factory=list, serialization_alias="ideasByStatuses"
    )
    recent_ideas: list[EnrichedIdea] = Field(
        default_factory=list, serialization_alias="recentIdeas"
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON document posted to the webhook."""
        return self.model_dump(mode="json", by_alias=True)

    @property
    def idea_count(self) -> int:
        return sum(len(s.ideas) for s in self.ideas_by_status) + len(self.recent_ideas)


@dataclass
class StatusListing:
    """Raw summaries collected for one status, before enrichment."""

    status: StatusFilter
    summaries: list[IdeaSummary]
