"""Attach detail-page content to idea summaries."""

import time
from typing import Protocol

import logfire

from wishlist_crawler.models.idea_models import EnrichedIdea, IdeaSummary
from wishlist_crawler.services.browser import PageRenderer
from wishlist_crawler.services.extractor import extract_idea_content
from wishlist_crawler.services.pacing import RequestPacer


class IdeaEnricher(Protocol):
    """Turns summaries into enriched ideas, preserving input order."""

    async def enrich(
        self, session: PageRenderer, summaries: list[IdeaSummary]
    ) -> list[EnrichedIdea]:
        ...


class DetailPageEnricher:
    """Fetch every idea's detail page in a secondary tab.

    Each summary is fetched on its own, even when the same detail URL was
    already enriched for another listing context.
    """

    def __init__(self, pacer: RequestPacer):
        self._pacer = pacer

    async def enrich_one(self, session: PageRenderer, summary: IdeaSummary) -> EnrichedIdea:
        await self._pacer.wait()
        async with session.open_tab() as tab:
            page = await tab.navigate(summary.detail_url)
            content = extract_idea_content(page)
        return EnrichedIdea.from_summary(summary, content)

    async def enrich(
        self, session: PageRenderer, summaries: list[IdeaSummary]
    ) -> list[EnrichedIdea]:
        """Enrich summaries one at a time.

        Raises:
            NavigationError: If a detail page fails to load
            ExtractionError: If a detail page has no description
        """
        start_time = time.time()
        enriched = [await self.enrich_one(session, summary) for summary in summaries]
        logfire.info(
            "Ideas enriched",
            idea_count=len(enriched),
            total_time_ms=(time.time() - start_time) * 1000,
        )
        return enriched


class PassthroughEnricher:
    """Fast mode: no detail pages, content fields stay empty."""

    async def enrich(
        self, session: PageRenderer, summaries: list[IdeaSummary]
    ) -> list[EnrichedIdea]:
        return [EnrichedIdea.from_summary(summary) for summary in summaries]
