import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from src.rifugio.driver import PlaywrightDriver


class StubLocator:
    def __init__(self, page, selector, index=None):
        self.page = page
        self.selector = selector
        self.index = index

    @property
    def first(self):
        return StubLocator(self.page, self.selector, 0)

    def nth(self, index):
        return StubLocator(self.page, self.selector, index)

    def locator(self, selector):
        return StubLocator(self.page, f"{self.selector} >> {selector}")

    async def count(self):
        total = self.page.counts.get(self.selector, 0)
        if self.index is not None:
            return 1 if self.index < total else 0
        return total

    async def wait_for(self, *, state, timeout):
        self.page.waits.append((self.selector, state, timeout))
        error = self.page.wait_errors.get(self.selector)
        if error:
            raise error


class StubDialog:
    def __init__(self, message, error=None):
        self.message = message
        self.type = "alert"
        self.dismissed = False
        self._error = error

    async def dismiss(self):
        self.dismissed = True
        if self._error:
            raise self._error


class StubPage:
    def __init__(self, counts=None, wait_errors=None):
        self.counts = counts or {}
        self.wait_errors = wait_errors or {}
        self.waits = []
        self.handlers = {}

    def locator(self, selector):
        return StubLocator(self, selector)

    def on(self, event, handler):
        self.handlers[event] = handler


@pytest.mark.asyncio
async def test_wait_for_uses_first_matching_locator():
    page = StubPage()

    found = await PlaywrightDriver(page).wait_for("table", state="attached", timeout_ms=10000)

    assert found is True
    assert page.waits == [("table", "attached", 10000)]


@pytest.mark.asyncio
async def test_wait_for_timeout_returns_false():
    page = StubPage(wait_errors={".reveal-overlay": PlaywrightTimeoutError("Timeout 3000ms exceeded.")})

    found = await PlaywrightDriver(page).wait_for(".reveal-overlay", timeout_ms=3000)

    assert found is False


@pytest.mark.asyncio
async def test_wait_for_other_errors_propagate():
    page = StubPage(wait_errors={"table": PlaywrightError("Target page, context or browser has been closed")})

    with pytest.raises(PlaywrightError):
        await PlaywrightDriver(page).wait_for("table", timeout_ms=1000)


@pytest.mark.asyncio
async def test_query_one_returns_none_when_nothing_matches():
    driver = PlaywrightDriver(StubPage(counts={"td.libero": 2}))

    assert await driver.query_one(".reveal-overlay .close") is None
    found = await driver.query_one("td.libero")
    assert found.selector == "td.libero"
    assert found.index == 0


@pytest.mark.asyncio
async def test_query_all_returns_one_locator_per_match():
    driver = PlaywrightDriver(StubPage(counts={"td.libero": 3}))

    cells = await driver.query_all("td.libero")

    assert [c.index for c in cells] == [0, 1, 2]


@pytest.mark.asyncio
async def test_query_one_scoped_to_root():
    page = StubPage(counts={"td.libero": 1, "td.libero >> a": 1})
    driver = PlaywrightDriver(page)
    [cell] = await driver.query_all("td.libero")

    anchor = await driver.query_one("a", root=cell)

    assert anchor.selector == "td.libero >> a"


@pytest.mark.asyncio
async def test_dialogs_are_dismissed_and_recorded(captured_logs):
    page = StubPage()
    driver = PlaywrightDriver(page)
    driver.auto_dismiss_dialogs()
    dialog = StubDialog("Sessione scaduta")

    await page.handlers["dialog"](dialog)

    assert dialog.dismissed is True
    assert driver.last_dialog == "Sessione scaduta"
    assert any(e["event"] == "dialog_dismissed" for e in captured_logs)


@pytest.mark.asyncio
async def test_dialog_dismiss_failure_is_not_raised():
    page = StubPage()
    driver = PlaywrightDriver(page)
    driver.auto_dismiss_dialogs()
    dialog = StubDialog("Conferma?", error=PlaywrightError("Dialog has already been handled"))

    await page.handlers["dialog"](dialog)

    assert dialog.dismissed is True
    assert driver.last_dialog == "Conferma?"
