"""Shared pytest fixtures and configuration.

This module centralizes the test fixtures for the crawler:
1. HTML builders: portal listing pages, idea cards and detail pages
2. FakeSession: an in-memory PageRenderer serving canned HTML per URL
3. Infrastructure: respx_mock, mock_settings, mock_logfire
"""

import os
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

try:
    import respx
except ImportError:
    respx = None

# Logfire stays unconfigured in tests
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from wishlist_crawler.exceptions import NavigationError
from wishlist_crawler.services.browser import RenderedPage

PORTAL_URL = "https://wishlist.example.com/"
RECENT_URL = PORTAL_URL + "?sort=recent"
PUSH_URL = "https://hooks.example.com/wishlist?token=secret"


# =============================================================================
# HTML builders
# =============================================================================


def idea_card_html(
    slug: str,
    name: str | None = None,
    preview: str = "A short preview",
    author: str = "Jane Doe",
    date: str = "Jan 5, 2024",
    category: str = "Designer",
    votes: str = "12",
    comments: str = "3",
    status: str | None = "In review",
    include_title: bool = True,
) -> str:
    """One li.idea card as rendered by the portal."""
    title = f"<h3>{name or slug.replace('-', ' ').title()}</h3>" if include_title else ""
    status_pill = f'<span class="status-pill">{status}</span>' if status else ""
    return f"""
    <li class="idea">
        <a class="idea-link" href="/ideas/{slug}">
            {title}
            <div class="description">{preview}</div>
        </a>
        <div class="avatar"><img src="https://cdn.example.com/avatars/{slug}.png"></div>
        <div class="idea-meta-created">
            <span class="idea-meta-secondary">
                Created {date}
                by {author}
            </span>
            <span class="idea-meta-secondary">{category}</span>
        </div>
        <span class="vote-count">{votes}</span>
        <span class="comment-count">{comments}</span>
        {status_pill}
    </li>
    """


def listing_html(
    cards: list[str],
    next_href: str | None = None,
    statuses: list[tuple[str, str, str]] | None = None,
) -> str:
    """A listing page with optional status filters and "next" link.

    statuses: (name, toggle value, href) tuples
    """
    filters = ""
    if statuses:
        links = "".join(
            f'<li><a data-url-param-toggle-value="{value}" href="{href}"> {name} </a></li>'
            for name, value, href in statuses
        )
        filters = f'<ul class="statuses filters">{links}</ul>'
    pagination = ""
    if next_href:
        pagination = f'<div class="pagination"><a rel="next" href="{next_href}">Next</a></div>'
    return f"""
    <html><body>
        <nav>{filters}</nav>
        <div class="portal-content">
            <ul class="list-ideas">{"".join(cards)}</ul>
            {pagination}
        </div>
    </body></html>
    """


def detail_html(content: str) -> str:
    """An idea detail page with its full description."""
    return f"""
    <html><body>
        <div class="portal-content">
            <div class="idea-content">
                <h1>Idea</h1>
                <div class="description"><p>{content}</p></div>
            </div>
        </div>
    </body></html>
    """


# =============================================================================
# Fake browser session
# =============================================================================


class FakeTab:
    def __init__(self, session: "FakeSession"):
        self._session = session

    async def navigate(self, url: str) -> RenderedPage:
        self._session.tab_navigations.append(url)
        return self._session._render(url)


class FakeSession:
    """In-memory PageRenderer: serves pages from a url -> html mapping.

    Records every navigation; unknown URLs raise NavigationError like a
    timed-out page load would.
    """

    def __init__(self, pages: dict[str, str]):
        self.pages = dict(pages)
        self.navigations: list[str] = []
        self.tab_navigations: list[str] = []
        self.open_tabs = 0
        self.tabs_opened = 0
        self.closed = False

    def _render(self, url: str) -> RenderedPage:
        if url not in self.pages:
            raise NavigationError(url, "timed out after 15s")
        return RenderedPage(url=url, html=self.pages[url])

    async def navigate(self, url: str) -> RenderedPage:
        self.navigations.append(url)
        return self._render(url)

    @asynccontextmanager
    async def open_tab(self):
        self.open_tabs += 1
        self.tabs_opened += 1
        try:
            yield FakeTab(self)
        finally:
            self.open_tabs -= 1

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed = True


@pytest.fixture
def fake_session_factory():
    """Build FakeSession instances from a url -> html mapping."""
    return FakeSession


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def respx_mock():
    """Respx mock fixture for HTTP mocking."""
    if respx is None:
        pytest.skip("respx not available")
    with respx.mock:
        yield respx


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings pointing at the test portal and webhook."""
    from wishlist_crawler.config import Settings

    settings = Settings(
        push_url=PUSH_URL,
        portal_url=PORTAL_URL,
        request_delay_seconds=1.5,
        navigation_timeout_seconds=15.0,
        enrich_ideas=True,
        spam_keywords=["webflow", "Webflow", "hosting", "CMS"],
        env="local",
        logfire_token=None,
        sentry_dsn=None,
    )
    monkeypatch.setattr("wishlist_crawler.config.get_settings", lambda: settings)
    monkeypatch.setattr(
        "wishlist_crawler.services.pipeline.get_settings", lambda: settings
    )
    return settings


@pytest.fixture
def pacer():
    """RequestPacer whose sleep is a recording AsyncMock."""
    from wishlist_crawler.services.pacing import RequestPacer

    return RequestPacer(1.5, sleep=AsyncMock())


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Patches the module-level logfire import of every crawler module and
    returns the mock so tests can assert on structured log calls.
    """
    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warning = Mock()
    mock_logfire_module.error = Mock()

    for module in (
        "wishlist_crawler.services.browser",
        "wishlist_crawler.services.paginator",
        "wishlist_crawler.services.status_crawler",
        "wishlist_crawler.services.enricher",
        "wishlist_crawler.services.spam_filter",
        "wishlist_crawler.services.publisher",
        "wishlist_crawler.services.pipeline",
        "wishlist_crawler.cli",
        "wishlist_crawler.logging_config",
    ):
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module
