"""Page driver: the browser operations the checker needs, and a Playwright backend.

Components receive a PageDriver explicitly and never touch Playwright objects
themselves, which keeps the reveal protocol testable against a fake page.
Elements are opaque to callers (Playwright Locators in the real backend);
they are only passed back to the driver.
"""

from typing import Any, Literal, Protocol

from playwright.async_api import (
    Dialog,
    Error as PlaywrightError,
    Locator,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from src.rifugio.errors import PageLoadError
from src.rifugio.logging import get_logger

log = get_logger(__name__)

WaitState = Literal["attached", "detached", "visible", "hidden"]


class PageDriver(Protocol):
    """Browser operations used by the locator and the reveal extractor."""

    async def goto(self, url: str, *, timeout_ms: int) -> None:
        """Navigate and wait for network idle. Raises PageLoadError."""
        ...

    async def wait_for(
        self, selector: str, *, state: WaitState = "visible", timeout_ms: int
    ) -> bool:
        """Wait for selector to reach state. Returns False on timeout."""
        ...

    async def query_one(self, selector: str, *, root: Any = None) -> Any | None: ...

    async def query_all(self, selector: str, *, root: Any = None) -> list[Any]: ...

    async def inner_text(self, element: Any) -> str: ...

    async def get_property(self, element: Any, name: str) -> Any: ...

    async def get_attribute(self, element: Any, name: str) -> str | None: ...

    async def bounding_box(self, element: Any) -> dict[str, float] | None: ...

    async def click(self, element: Any, *, timeout_ms: int) -> None:
        """Native (mouse) click. Raises if the element can't be clicked."""
        ...

    async def dispatch_click(self, element: Any) -> None:
        """Programmatic click dispatched inside the page (el.click())."""
        ...

    async def press(self, key: str) -> None: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run a read-only query inside the page and return its JSON result."""
        ...

    def auto_dismiss_dialogs(self) -> None:
        """Dismiss alert/confirm/prompt dialogs as soon as they open."""
        ...


class PlaywrightDriver:
    """PageDriver backed by a Playwright async Page.

    Elements are Locators: page.locator(SEL).nth(i) for cells and
    cell.locator("a").first for links inside them.
    """

    def __init__(self, page: Page) -> None:
        self.page = page
        self.last_dialog: str | None = None

    async def goto(self, url: str, *, timeout_ms: int) -> None:
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightError as e:
            raise PageLoadError(f"Failed to load {url}: {e.message}") from e

    async def wait_for(
        self, selector: str, *, state: WaitState = "visible", timeout_ms: int
    ) -> bool:
        try:
            await self.page.locator(selector).first.wait_for(
                state=state, timeout=timeout_ms
            )
        except PlaywrightTimeoutError:
            log.debug("wait_timed_out", selector=selector, state=state, timeout_ms=timeout_ms)
            return False
        return True

    def _scope(self, root: Locator | None) -> Page | Locator:
        return root if root is not None else self.page

    async def query_one(self, selector: str, *, root: Locator | None = None) -> Locator | None:
        locator = self._scope(root).locator(selector).first
        if await locator.count() == 0:
            return None
        return locator

    async def query_all(self, selector: str, *, root: Locator | None = None) -> list[Locator]:
        locator = self._scope(root).locator(selector)
        count = await locator.count()
        return [locator.nth(i) for i in range(count)]

    async def inner_text(self, element: Locator) -> str:
        return await element.inner_text()

    async def get_property(self, element: Locator, name: str) -> Any:
        return await element.evaluate("(el, name) => el[name]", name)

    async def get_attribute(self, element: Locator, name: str) -> str | None:
        return await element.get_attribute(name)

    async def bounding_box(self, element: Locator) -> dict[str, float] | None:
        return await element.bounding_box()

    async def click(self, element: Locator, *, timeout_ms: int) -> None:
        await element.click(button="left", timeout=timeout_ms)

    async def dispatch_click(self, element: Locator) -> None:
        await element.evaluate("el => el.click()")

    async def press(self, key: str) -> None:
        await self.page.keyboard.press(key)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

    def auto_dismiss_dialogs(self) -> None:
        async def _dismiss(dialog: Dialog) -> None:
            self.last_dialog = dialog.message
            log.info("dialog_dismissed", type=dialog.type, message=dialog.message)
            try:
                await dialog.dismiss()
            except PlaywrightError as e:
                log.debug("dialog_dismiss_failed", error=e.message)

        self.page.on("dialog", _dismiss)
