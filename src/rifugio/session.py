"""Playwright browser session for one availability check.

BrowserSession owns the only browser and page of a run and hands out the
PageDriver that every component receives explicitly. No authentication or
storage state: the availability page is public.
"""

from typing import TYPE_CHECKING

from playwright.async_api import async_playwright

from src.rifugio.config import CheckerConfig
from src.rifugio.driver import PlaywrightDriver
from src.rifugio.logging import get_logger
from src.rifugio.utils import configure_page_for_scraping

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Playwright

logger = get_logger(__name__)


class BrowserSession:
    """Async context manager launching Chromium and yielding a PlaywrightDriver.

    Usage:
        async with BrowserSession(config) as driver:
            checker = AvailabilityChecker(driver, config)
            run = await checker.run()
    """

    def __init__(self, config: CheckerConfig) -> None:
        self._config = config
        self._playwright: "Playwright | None" = None
        self._browser: "Browser | None" = None
        self._context: "BrowserContext | None" = None
        self.driver: PlaywrightDriver | None = None

    async def __aenter__(self) -> PlaywrightDriver:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self._config.headless,
                args=["--no-sandbox"],
            )
            self._context = await self._browser.new_context(
                user_agent=self._config.user_agent
            )
            page = await self._context.new_page()
            await configure_page_for_scraping(
                page, timeout_ms=self._config.navigation_timeout_ms
            )
        except BaseException as e:
            logger.debug("browser_session_failed", error=str(e), type=type(e).__name__)
            await self.close()
            raise

        self.driver = PlaywrightDriver(page)
        self.driver.auto_dismiss_dialogs()

        logger.info(
            "browser_session_started",
            headless=self._config.headless,
        )
        return self.driver

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
        logger.info("browser_session_closed")

    async def close(self) -> None:
        """Close whatever part of the session was started, innermost first."""
        if self._context:
            await self._context.close()
            self._context = None
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
