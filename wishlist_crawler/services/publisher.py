"""Send the crawl result to the configured webhook."""

import time
from urllib.parse import urlparse

import httpx
import logfire

from wishlist_crawler.constants import PUBLISH_TIMEOUT_SECONDS
from wishlist_crawler.exceptions import PublishError
from wishlist_crawler.models.idea_models import CrawlResult
from wishlist_crawler.models.publish_models import PublishResponse


def mask_url(url: str) -> str:
    """Keep scheme, host and path of a webhook URL; drop credentials and query."""
    parsed = urlparse(url)
    host = parsed.hostname or ""
    if parsed.port:
        host = f"{host}:{parsed.port}"
    masked = f"{parsed.scheme}://{host}{parsed.path}"
    if parsed.query:
        masked += "?***"
    return masked


async def publish_results(
    result: CrawlResult,
    push_url: str,
    timeout: float = PUBLISH_TIMEOUT_SECONDS,
) -> PublishResponse:
    """
    POST the crawl result as JSON to push_url.

    Args:
        result: Aggregated crawl result
        push_url: Destination webhook URL
        timeout: Request timeout in seconds

    Returns:
        The destination's status, reason phrase and body

    Raises:
        PublishError: If the destination is unreachable or answers with a non-2xx status
    """
    start_time = time.time()
    payload = result.to_payload()
    logfire.info(
        "Publishing crawl result",
        url=mask_url(push_url),
        status_count=len(result.ideas_by_status),
        idea_count=result.idea_count,
    )

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(push_url, json=payload)
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Publish request error",
            url=mask_url(push_url),
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise PublishError(f"Could not reach {mask_url(push_url)}: {e}") from e

    elapsed = time.time() - start_time
    if not response.is_success:
        logfire.error(
            "Publish rejected",
            url=mask_url(push_url),
            status_code=response.status_code,
            response_body=response.text[:500],
            response_time_ms=elapsed * 1000,
        )
        raise PublishError(
            f"Destination answered {response.status_code} ({response.reason_phrase}): "
            f"{response.text[:500]}",
            status_code=response.status_code,
            response_text=response.text,
        )

    logfire.info(
        "Crawl result published",
        url=mask_url(push_url),
        status_code=response.status_code,
        response_time_ms=elapsed * 1000,
    )
    return PublishResponse(
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        text=response.text,
    )
