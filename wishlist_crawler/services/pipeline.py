"""Crawl orchestration: listings, enrichment, filtering, aggregation, publish.

The pipeline owns the browser session for the whole run:
1. Crawl every status listing
2. Crawl the recency-sorted listing
3. Enrich and spam-filter each listing context independently
4. Assemble the CrawlResult and publish it once

Nothing is published unless every step succeeded, and the browser is
closed on every exit path.
"""

from typing import Any, Awaitable, Callable

import logfire

from wishlist_crawler.config import Settings, get_settings
from wishlist_crawler.models.idea_models import (
    CrawlResult,
    EnrichedIdea,
    IdeaSummary,
    StatusIdeas,
)
from wishlist_crawler.models.publish_models import PublishResponse
from wishlist_crawler.services.browser import CrawlSession, PageRenderer
from wishlist_crawler.services.enricher import (
    DetailPageEnricher,
    IdeaEnricher,
    PassthroughEnricher,
)
from wishlist_crawler.services.pacing import RequestPacer
from wishlist_crawler.services.paginator import Paginator
from wishlist_crawler.services.publisher import publish_results
from wishlist_crawler.services.spam_filter import SpamFilter
from wishlist_crawler.services.status_crawler import StatusCrawler

Publisher = Callable[..., Awaitable[PublishResponse]]


class CrawlPipeline:
    """Run the crawl stages against one session and build the CrawlResult.

    Components can be injected for testing; from_settings() wires the
    production ones around a single shared RequestPacer.
    """

    def __init__(
        self,
        status_crawler: StatusCrawler,
        paginator: Paginator,
        enricher: IdeaEnricher,
        spam_filter: SpamFilter,
        pacer: RequestPacer,
    ):
        self._status_crawler = status_crawler
        self._paginator = paginator
        self._enricher = enricher
        self._spam_filter = spam_filter
        self._pacer = pacer

    @classmethod
    def from_settings(
        cls, settings: Settings, pacer: RequestPacer | None = None
    ) -> "CrawlPipeline":
        pacer = pacer or RequestPacer(settings.request_delay_seconds)
        paginator = Paginator(pacer, max_pages=settings.max_listing_pages)
        enricher: IdeaEnricher = (
            DetailPageEnricher(pacer) if settings.enrich_ideas else PassthroughEnricher()
        )
        return cls(
            status_crawler=StatusCrawler(paginator, pacer),
            paginator=paginator,
            enricher=enricher,
            spam_filter=SpamFilter(settings.spam_keywords),
            pacer=pacer,
        )

    async def _process(
        self, session: PageRenderer, summaries: list[IdeaSummary], context: str
    ) -> list[EnrichedIdea]:
        with logfire.span("enrichment", context=context, idea_count=len(summaries)):
            enriched = await self._enricher.enrich(session, summaries)
        return self._spam_filter.filter(enriched, context=context)

    async def run(
        self, session: PageRenderer, portal_url: str, recent_url: str
    ) -> CrawlResult:
        """Crawl, enrich and filter every listing context.

        Raises:
            CrawlerError: Any stage failure; no partial result is returned
        """
        with logfire.span("status_crawl", url=portal_url):
            listings = await self._status_crawler.crawl(session, portal_url)

        with logfire.span("recent_crawl", url=recent_url):
            await self._pacer.wait()
            recent_summaries = await self._paginator.collect(session, recent_url)

        ideas_by_status = []
        for listing in listings:
            ideas = await self._process(session, listing.summaries, listing.status.name)
            ideas_by_status.append(StatusIdeas.from_status(listing.status, ideas))
        recent_ideas = await self._process(session, recent_summaries, "recent")

        result = CrawlResult(ideas_by_status=ideas_by_status, recent_ideas=recent_ideas)
        logfire.info(
            "Crawl result assembled",
            status_count=len(result.ideas_by_status),
            recent_count=len(result.recent_ideas),
            idea_count=result.idea_count,
            paced_requests=self._pacer.wait_count,
        )
        return result


def _default_session_factory(settings: Settings) -> CrawlSession:
    return CrawlSession(
        navigation_timeout=settings.navigation_timeout_seconds,
        headless=settings.headless,
        chrome_version_main=settings.chrome_version_main,
        window_size=(settings.window_width, settings.window_height),
    )


async def run_crawl(
    settings: Settings | None = None,
    session_factory: Callable[[Settings], Any] | None = None,
    publisher: Publisher = publish_results,
    pipeline: CrawlPipeline | None = None,
) -> PublishResponse:
    """
    Run one complete crawl and publish its result.

    Settings are resolved before the browser starts, so a missing PUSH_URL
    fails without any network activity.

    Args:
        settings: Application settings (defaults to get_settings())
        session_factory: Builds the async-context-managed session from settings
        publisher: Coroutine function sending the result to the destination
        pipeline: Pre-built pipeline (defaults to CrawlPipeline.from_settings())

    Returns:
        The destination's response

    Raises:
        ConfigurationError: If required settings are missing
        CrawlerError: If any crawl stage or the publish fails
    """
    settings = settings or get_settings()
    pipeline = pipeline or CrawlPipeline.from_settings(settings)
    session_factory = session_factory or _default_session_factory

    async with session_factory(settings) as session:
        result = await pipeline.run(session, settings.portal_url, settings.recent_url)

    with logfire.span("publish", idea_count=result.idea_count):
        return await publisher(
            result, settings.push_url, timeout=settings.publish_timeout_seconds
        )
