"""Headless browser session used to render portal pages.

The crawl stages never touch the driver directly. They receive a session
exposing two capabilities:
- navigate(url) -> RenderedPage: load a URL in the main tab and snapshot its DOM
- open_tab() -> TabHandle: a scoped secondary tab for detail pages

The driver (undetected Chrome) is blocking, so every call runs through
asyncio.to_thread(); each await is one suspension point.
"""

import asyncio
from contextlib import asynccontextmanager
from functools import cached_property
from typing import Any, AsyncIterator, Callable, Protocol

import logfire
from bs4 import BeautifulSoup
from selenium.common.exceptions import TimeoutException, WebDriverException

from wishlist_crawler.constants import (
    BROWSER_EXTRA_HEADERS,
    BROWSER_WINDOW_HEIGHT,
    BROWSER_WINDOW_WIDTH,
    NAVIGATION_TIMEOUT_SECONDS,
)
from wishlist_crawler.exceptions import BrowserSessionError, NavigationError


class RenderedPage:
    """DOM snapshot of a page after navigation."""

    def __init__(self, url: str, html: str):
        self.url = url
        self.html = html

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    def __repr__(self) -> str:
        return f"RenderedPage(url={self.url!r}, html_length={len(self.html)})"


class TabHandle(Protocol):
    """A secondary browser tab, valid only inside its open_tab() block."""

    async def navigate(self, url: str) -> RenderedPage:
        """Load a URL in this tab.

        Raises:
            NavigationError: If the page does not load within the timeout
        """
        ...


class PageRenderer(Protocol):
    """Capability interface handed to the crawl stages."""

    async def navigate(self, url: str) -> RenderedPage:
        """Load a URL in the main tab and return its rendered DOM.

        Raises:
            NavigationError: If the page does not load within the timeout
        """
        ...

    def open_tab(self) -> Any:
        """Return an async context manager yielding a TabHandle."""
        ...


class _ChromeTab:
    def __init__(self, session: "CrawlSession"):
        self._session = session

    async def navigate(self, url: str) -> RenderedPage:
        return await self._session._navigate(url, tab="detail")


class CrawlSession:
    """One headless Chrome instance, owned by the orchestration layer.

    Use as an async context manager; the browser is quit on every exit path.
    """

    def __init__(
        self,
        navigation_timeout: float = NAVIGATION_TIMEOUT_SECONDS,
        headless: bool = True,
        chrome_version_main: int | None = None,
        window_size: tuple[int, int] = (BROWSER_WINDOW_WIDTH, BROWSER_WINDOW_HEIGHT),
        driver_factory: Callable[[], Any] | None = None,
    ):
        """Initialize the session (the browser starts on __aenter__).

        Args:
            navigation_timeout: Page load timeout in seconds
            headless: Run Chrome without a window
            chrome_version_main: Chrome major version, if the bundled driver mismatches
            window_size: Viewport (width, height)
            driver_factory: Optional callable returning a ready driver (tests)
        """
        self._navigation_timeout = navigation_timeout
        self._headless = headless
        self._chrome_version_main = chrome_version_main
        self._window_size = window_size
        self._driver_factory = driver_factory or self._create_driver
        self._driver: Any = None
        self.navigation_count = 0

    async def __aenter__(self) -> "CrawlSession":
        try:
            self._driver = await asyncio.to_thread(self._driver_factory)
            await asyncio.to_thread(self._configure_driver, self._driver)
        except WebDriverException as e:
            await self.close()
            raise BrowserSessionError(f"Failed to start browser: {e.msg or e}") from e
        logfire.info(
            "Browser session started",
            headless=self._headless,
            navigation_timeout_seconds=self._navigation_timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Quit the browser. Safe to call more than once."""
        driver, self._driver = self._driver, None
        if driver is None:
            return
        try:
            await asyncio.to_thread(driver.quit)
        except WebDriverException as e:
            logfire.warning("Browser quit failed", error=str(e))
        logfire.info("Browser session closed", navigations=self.navigation_count)

    def _create_driver(self) -> Any:
        import undetected_chromedriver as uc

        options = uc.ChromeOptions()
        width, height = self._window_size
        options.add_argument(f"--window-size={width},{height}")
        kwargs: dict = {"options": options, "headless": self._headless}
        if self._chrome_version_main is not None:
            kwargs["version_main"] = self._chrome_version_main
        return uc.Chrome(**kwargs)

    def _configure_driver(self, driver: Any) -> None:
        width, height = self._window_size
        driver.set_page_load_timeout(self._navigation_timeout)
        driver.set_window_size(width, height)
        driver.execute_cdp_cmd("Network.enable", {})
        driver.execute_cdp_cmd(
            "Network.setExtraHTTPHeaders", {"headers": dict(BROWSER_EXTRA_HEADERS)}
        )

    @property
    def driver(self) -> Any:
        if self._driver is None:
            raise BrowserSessionError("Browser session is not open")
        return self._driver

    def _navigate_sync(self, url: str) -> RenderedPage:
        driver = self.driver
        try:
            driver.get(url)
            return RenderedPage(url=driver.current_url, html=driver.page_source)
        except TimeoutException as e:
            raise NavigationError(
                url, f"timed out after {self._navigation_timeout:g}s"
            ) from e
        except WebDriverException as e:
            raise NavigationError(url, e.msg or str(e)) from e

    async def _navigate(self, url: str, tab: str = "main") -> RenderedPage:
        self.navigation_count += 1
        page = await asyncio.to_thread(self._navigate_sync, url)
        logfire.info(
            "Page rendered",
            url=url,
            tab=tab,
            content_length=len(page.html),
        )
        return page

    async def navigate(self, url: str) -> RenderedPage:
        return await self._navigate(url)

    @asynccontextmanager
    async def open_tab(self) -> AsyncIterator[TabHandle]:
        """Open a secondary tab, switch back to the main tab on exit."""
        driver = self.driver
        main_handle = driver.current_window_handle
        try:
            await asyncio.to_thread(driver.switch_to.new_window, "tab")
        except WebDriverException as e:
            raise BrowserSessionError(f"Failed to open tab: {e.msg or e}") from e
        try:
            yield _ChromeTab(self)
        finally:
            await asyncio.to_thread(self._close_tab, main_handle)

    def _close_tab(self, main_handle: str) -> None:
        driver = self._driver
        if driver is None:
            return
        try:
            if driver.current_window_handle != main_handle:
                driver.close()
        except WebDriverException as e:
            logfire.warning("Tab close failed", error=e.msg or str(e))
        finally:
            driver.switch_to.window(main_handle)
