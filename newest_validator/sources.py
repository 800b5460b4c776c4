import asyncio
import logging
from typing import List, Optional, Protocol
from urllib.parse import urljoin

import requests
from fake_useragent import UserAgent
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright_stealth import Stealth

from newest_validator.config import RunConfig
from newest_validator.errors import NavigationError, NoMoreItems
from newest_validator.extraction import MORE_LINK_SELECTOR, ListingParser
from newest_validator.models import RawItem

logger = logging.getLogger(__name__)

# Constants
STATIC_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
STATIC_TIMEOUT_SECONDS = 10
BROWSER_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--no-first-run",
    "--disable-gpu",
]


class ListingSource(Protocol):
    async def __aenter__(self) -> "ListingSource":
        ...

    async def __aexit__(self, exc_type, exc, tb) -> None:
        ...

    async def navigate(self, url: str) -> None:
        """Load `url` and wait for it to settle."""

    async def extract_visible_items(self) -> List[RawItem]:
        """Return every item currently on the page, complete or not."""

    async def load_more(self) -> None:
        """Reveal the next page; raise NoMoreItems when there is none."""

    async def close(self) -> None:
        ...


class BrowserListingSource:
    """Chromium page driven through Playwright."""

    def __init__(self, headless: bool = True, navigation_timeout_ms: int = 30000):
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "BrowserListingSource":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=BROWSER_ARGS,
            )
            context = await self._browser.new_context(
                user_agent=UserAgent().random,
                viewport={"width": 1920, "height": 1080},
                locale="en-US",
            )
            self._page = await context.new_page()
            await Stealth().apply_stealth_async(self._page)
        except PlaywrightError as e:
            # __aexit__ never runs when __aenter__ fails
            await self.close()
            raise NavigationError(f"Browser launch failed: {e}") from e

    @property
    def page(self) -> Page:
        if self._page is None:
            raise NavigationError("Browser page is not open; use 'async with' on the source first.")
        return self._page

    async def navigate(self, url: str) -> None:
        logger.info("Navigating to %s ...", url)
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {url} failed: {e}") from e

    async def extract_visible_items(self) -> List[RawItem]:
        try:
            content = await self.page.content()
        except PlaywrightError as e:
            raise NavigationError(f"Reading page content failed: {e}") from e
        return ListingParser.parse_listing(content, parser="html.parser")

    async def load_more(self) -> None:
        try:
            more = await self.page.query_selector(MORE_LINK_SELECTOR)
        except PlaywrightError as e:
            raise NavigationError(f"Looking up '{MORE_LINK_SELECTOR}' failed: {e}") from e
        if more is None:
            raise NoMoreItems(f"No '{MORE_LINK_SELECTOR}' control on {self.page.url}")
        try:
            async with self.page.expect_navigation(wait_until="networkidle", timeout=self.navigation_timeout_ms):
                await more.click()
        except PlaywrightError as e:
            raise NavigationError(f"Loading the next page failed: {e}") from e

    async def close(self) -> None:
        logger.info("Closing browser...")
        try:
            if self._browser is not None:
                await self._browser.close()
        except PlaywrightError as e:
            logger.warning("Browser close failed: %s", e)
        try:
            if self._playwright is not None:
                await self._playwright.stop()
        except PlaywrightError as e:
            logger.warning("Playwright shutdown failed: %s", e)
        self._page = None
        self._browser = None
        self._playwright = None


class StaticListingSource:
    """Plain HTTP pagination that follows the listing's "More" link."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = STATIC_TIMEOUT_SECONDS):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.current_url: Optional[str] = None
        self._html: Optional[str] = None

    async def __aenter__(self) -> "StaticListingSource":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _fetch(self, url: str) -> str:
        headers = {"User-Agent": STATIC_USER_AGENT}
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NavigationError(f"Static fetch of {url} failed: {e}") from e
        return response.text

    async def navigate(self, url: str) -> None:
        logger.info("Fetching %s ...", url)
        # requests is blocking; keep the event loop free
        self._html = await asyncio.to_thread(self._fetch, url)
        self.current_url = url

    async def extract_visible_items(self) -> List[RawItem]:
        if self._html is None:
            raise NavigationError("Nothing fetched yet; call navigate() first.")
        return ListingParser.parse_listing(self._html)

    async def load_more(self) -> None:
        href = ListingParser.more_link(self._html) if self._html else None
        if not href:
            raise NoMoreItems(f"No '{MORE_LINK_SELECTOR}' link on {self.current_url}")
        await self.navigate(urljoin(self.current_url, href))

    async def close(self) -> None:
        self.session.close()


def build_source(config: RunConfig) -> ListingSource:
    if config.static:
        return StaticListingSource(timeout=config.navigation_timeout_ms / 1000)
    return BrowserListingSource(
        headless=config.headless,
        navigation_timeout_ms=config.navigation_timeout_ms,
    )
