"""Exceptions raised by the crawl pipeline."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wishlist_crawler.models.idea_models import StatusFilter


class CrawlerError(Exception):
    """Base exception for crawler errors."""

    stage = "crawl"


class ConfigurationError(CrawlerError):
    """Raised when a required setting is missing or invalid."""

    stage = "configuration"


class NavigationError(CrawlerError):
    """Raised when a page fails to load within its timeout.

    Fatal for the whole run: the browser session is shared, so a navigation
    fault leaves no trustworthy state to continue from.
    """

    stage = "navigation"

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason}")


class ExtractionError(CrawlerError):
    """Raised when expected portal markup is absent."""

    stage = "extraction"

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        if url:
            message = f"{message} (page: {url})"
        super().__init__(message)


class StatusCrawlError(CrawlerError):
    """Every status listing that failed during the status crawl.

    Holds every (status, error) pair in discovery order. Statuses sharing a
    display name stay distinct since each entry names its listing URL.
    """

    stage = "status crawl"

    def __init__(self, failures: list[tuple["StatusFilter", Exception]]):
        self.failures = failures
        details = "; ".join(
            f"{status.name} ({status.listing_url}): {error}" for status, error in failures
        )
        super().__init__(f"{len(failures)} status listing(s) failed: {details}")


class PublishError(CrawlerError):
    """Raised when the destination endpoint rejects or cannot receive the payload."""

    stage = "publish"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ):
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(message)


class BrowserSessionError(CrawlerError):
    """Raised when the headless browser cannot be started or driven."""

    stage = "browser"
