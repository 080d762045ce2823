"""Crawl of every status filter's listing."""

import logfire

from wishlist_crawler.exceptions import CrawlerError, NavigationError, StatusCrawlError
from wishlist_crawler.models.idea_models import StatusFilter, StatusListing
from wishlist_crawler.services.browser import PageRenderer
from wishlist_crawler.services.extractor import extract_statuses
from wishlist_crawler.services.pacing import RequestPacer
from wishlist_crawler.services.paginator import Paginator


class StatusCrawler:
    """Discover the portal's status filters and paginate each one.

    Statuses are crawled in discovery order. A navigation fault aborts the
    crawl at once since the browser session is shared. Any other failure is
    recorded and the remaining statuses are still crawled. The first crawler
    error, such as an ExtractionError, is then raised unchanged and chained to a
    StatusCrawlError listing every failure.
    """

    def __init__(self, paginator: Paginator, pacer: RequestPacer):
        self._paginator = paginator
        self._pacer = pacer

    async def discover(self, session: PageRenderer, portal_url: str) -> list[StatusFilter]:
        page = await session.navigate(portal_url)
        statuses = extract_statuses(page)
        logfire.info(
            "Status filters discovered",
            url=portal_url,
            statuses=[s.name for s in statuses],
        )
        return statuses

    async def crawl(self, session: PageRenderer, portal_url: str) -> list[StatusListing]:
        """Collect the raw idea summaries of every status.

        Raises:
            NavigationError: If any page fails to load
            CrawlerError: The first crawler failure among the statuses
            StatusCrawlError: If statuses failed only with non-crawler errors
        """
        statuses = await self.discover(session, portal_url)
        listings: list[StatusListing] = []
        failures: list[tuple[StatusFilter, Exception]] = []

        for status in statuses:
            await self._pacer.wait()
            try:
                summaries = await self._paginator.collect(session, status.listing_url)
            except NavigationError:
                raise
            except Exception as e:
                logfire.error(
                    "Status listing failed",
                    status=status.name,
                    url=status.listing_url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                failures.append((status, e))
                continue

            logfire.info(
                "Status listing collected",
                status=status.name,
                idea_count=len(summaries),
            )
            listings.append(StatusListing(status=status, summaries=summaries))

        if failures:
            _raise_failures(failures)
        return listings


def _raise_failures(failures: list[tuple[StatusFilter, Exception]]) -> None:
    summary = StatusCrawlError(failures)
    logfire.error(
        "Status crawl failed",
        failure_count=len(failures),
        failed_urls=[status.listing_url for status, _ in failures],
    )
    for _, error in failures:
        if isinstance(error, CrawlerError):
            raise error from summary
    raise summary from failures[0][1]
