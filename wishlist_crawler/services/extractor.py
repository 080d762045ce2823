"""Extraction of structured records from rendered portal pages.

Every function here is pure: it reads a RenderedPage snapshot and returns
models, raising ExtractionError when the markup no longer looks like the
portal's. A missing node means the portal changed and needs attention, so
nothing is skipped silently.
"""

import re
from urllib.parse import urljoin

from bs4 import Tag

from wishlist_crawler.constants import (
    IDEA_AUTHOR_IMAGE_SELECTOR,
    IDEA_CARD_SELECTOR,
    IDEA_CATEGORY_SELECTOR,
    IDEA_COMMENT_COUNT_SELECTOR,
    IDEA_CONTENT_SELECTOR,
    IDEA_CREATED_LINE_SELECTOR,
    IDEA_LINK_SELECTOR,
    IDEA_PREVIEW_SELECTOR,
    IDEA_STATUS_SELECTOR,
    IDEA_TITLE_SELECTOR,
    IDEA_VOTE_COUNT_SELECTOR,
    NEXT_PAGE_LINK_SELECTOR,
    STATUS_FILTER_ID_ATTRIBUTE,
    STATUS_FILTER_LINK_SELECTOR,
)
from wishlist_crawler.exceptions import ExtractionError
from wishlist_crawler.models.idea_models import IdeaContent, IdeaSummary, StatusFilter
from wishlist_crawler.services.browser import RenderedPage

# Both patterns run on the same "Created <date> by <name>" line
CREATED_DATE_PATTERN = re.compile(r"Created (.+) by.+", re.DOTALL)
AUTHOR_NAME_PATTERN = re.compile(r".+ by (.+)", re.DOTALL)


def _text(node: Tag) -> str:
    return node.get_text().strip()


def _require(card: Tag, selector: str, field: str, index: int, url: str) -> Tag:
    node = card.select_one(selector)
    if node is None:
        raise ExtractionError(
            f"Idea card #{index + 1} has no {field} node ({selector})", url=url
        )
    return node


def _require_attr(node: Tag, attr: str, field: str, index: int, url: str) -> str:
    value = (node.get(attr) or "").strip()
    if not value:
        raise ExtractionError(
            f"Idea card #{index + 1} has no {field} ({attr} attribute missing)",
            url=url,
        )
    return value


def split_created_line(line: str) -> tuple[str, str]:
    """Split a "Created <date> by <name>" line into (date, name).

    Both patterns must match; a line that satisfies only one of them is as
    broken as one that satisfies neither.

    Raises:
        ExtractionError: If the line does not have the expected shape
    """
    normalized = " ".join(line.split())
    date_match = CREATED_DATE_PATTERN.fullmatch(normalized)
    name_match = AUTHOR_NAME_PATTERN.fullmatch(normalized)
    if date_match is None or name_match is None:
        raise ExtractionError(f"Unrecognized created line: {line!r}")
    date = date_match.group(1).strip()
    name = name_match.group(1).strip()
    if not date or not name:
        raise ExtractionError(f"Unrecognized created line: {line!r}")
    return date, name


def extract_statuses(page: RenderedPage) -> list[StatusFilter]:
    """Read the status filter links, in page order. Empty when there are none."""
    statuses = []
    for link in page.soup.select(STATUS_FILTER_LINK_SELECTOR):
        statuses.append(
            StatusFilter(
                name=_text(link),
                id=link.get(STATUS_FILTER_ID_ATTRIBUTE),
                listing_url=urljoin(page.url, link.get("href") or ""),
            )
        )
    return statuses


def _extract_card(card: Tag, index: int, url: str) -> IdeaSummary:
    title = _require(card, IDEA_TITLE_SELECTOR, "title", index, url)
    preview = _require(card, IDEA_PREVIEW_SELECTOR, "preview", index, url)
    image = _require(card, IDEA_AUTHOR_IMAGE_SELECTOR, "author image", index, url)
    link = _require(card, IDEA_LINK_SELECTOR, "detail link", index, url)
    created = _require(card, IDEA_CREATED_LINE_SELECTOR, "created line", index, url)
    category = _require(card, IDEA_CATEGORY_SELECTOR, "category", index, url)
    votes = _require(card, IDEA_VOTE_COUNT_SELECTOR, "vote count", index, url)
    comments = _require(card, IDEA_COMMENT_COUNT_SELECTOR, "comment count", index, url)
    status = card.select_one(IDEA_STATUS_SELECTOR)

    try:
        created_date, author_name = split_created_line(_text(created))
    except ExtractionError as e:
        raise ExtractionError(f"Idea card #{index + 1}: {e}", url=url) from e

    return IdeaSummary(
        name=_text(title),
        preview_text=_text(preview),
        author_image=urljoin(url, _require_attr(image, "src", "author image", index, url)),
        author_name=author_name,
        created_date=created_date,
        category=_text(category),
        vote_count=_text(votes),
        comment_count=_text(comments),
        status=_text(status) if status is not None else None,
        detail_url=urljoin(url, _require_attr(link, "href", "detail link", index, url)),
    )


def extract_idea_summaries(page: RenderedPage) -> list[IdeaSummary]:
    """Read every idea card of a listing page.

    Raises:
        ExtractionError: If any card lacks a required node; no partial list is returned
    """
    cards = page.soup.select(IDEA_CARD_SELECTOR)
    return [_extract_card(card, index, page.url) for index, card in enumerate(cards)]


def extract_next_page_url(page: RenderedPage) -> str | None:
    """Absolute URL of the "next" pagination link, or None on the last page."""
    link = page.soup.select_one(NEXT_PAGE_LINK_SELECTOR)
    if link is None:
        return None
    href = (link.get("href") or "").strip()
    if not href:
        return None
    return urljoin(page.url, href)


def extract_idea_content(page: RenderedPage) -> IdeaContent:
    """Read an idea's full description from its detail page.

    Raises:
        ExtractionError: If the description node is absent
    """
    node = page.soup.select_one(IDEA_CONTENT_SELECTOR)
    if node is None:
        raise ExtractionError(
            f"Idea detail page has no description node ({IDEA_CONTENT_SELECTOR})",
            url=page.url,
        )
    return IdeaContent(text=_text(node), html=node.decode_contents().strip())
