"""Traversal of one paginated listing context."""

from enum import Enum

import logfire

from wishlist_crawler.constants import MAX_LISTING_PAGES
from wishlist_crawler.models.idea_models import IdeaSummary
from wishlist_crawler.services.browser import PageRenderer, RenderedPage
from wishlist_crawler.services.extractor import (
    extract_idea_summaries,
    extract_next_page_url,
)
from wishlist_crawler.services.pacing import RequestPacer


class PaginatorState(str, Enum):
    FETCHING = "fetching"
    HAS_IDEAS = "has_ideas"
    DONE = "done"


class Paginator:
    """Follow "next" links from a listing page, accumulating idea summaries.

    Stops on the last page, on a "next" link that points back to a page
    already visited in this context, or after max_pages pages.
    """

    def __init__(self, pacer: RequestPacer, max_pages: int = MAX_LISTING_PAGES):
        self._pacer = pacer
        self._max_pages = max_pages
        self.state = PaginatorState.DONE
        self.pages_fetched = 0

    async def collect(self, session: PageRenderer, start_url: str) -> list[IdeaSummary]:
        """Navigate to start_url and collect every page of the listing.

        Raises:
            NavigationError: If a page fails to load
            ExtractionError: If a page's idea cards are malformed
        """
        self.state = PaginatorState.FETCHING
        page = await session.navigate(start_url)
        return await self.collect_from(session, page)

    async def collect_from(
        self, session: PageRenderer, page: RenderedPage
    ) -> list[IdeaSummary]:
        """Collect the listing starting at an already rendered page."""
        ideas: list[IdeaSummary] = []
        start_url = page.url
        visited = {start_url}
        self.pages_fetched = 1

        while True:
            page_ideas = extract_idea_summaries(page)
            ideas.extend(page_ideas)
            self.state = PaginatorState.HAS_IDEAS

            next_url = extract_next_page_url(page)
            if next_url is None:
                break
            if next_url in visited:
                logfire.warning(
                    "Pagination cycle detected, stopping listing",
                    url=page.url,
                    next_url=next_url,
                    pages_fetched=self.pages_fetched,
                )
                break
            if self.pages_fetched >= self._max_pages:
                logfire.warning(
                    "Pagination page cap reached, stopping listing",
                    url=page.url,
                    max_pages=self._max_pages,
                )
                break

            await self._pacer.wait()
            self.state = PaginatorState.FETCHING
            page = await session.navigate(next_url)
            visited.add(next_url)
            visited.add(page.url)
            self.pages_fetched += 1

        self.state = PaginatorState.DONE
        logfire.info(
            "Listing collected",
            start_url=start_url,
            pages_fetched=self.pages_fetched,
            idea_count=len(ideas),
        )
        return ideas
