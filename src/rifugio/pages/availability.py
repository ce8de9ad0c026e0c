"""AvailabilityPage - locates available calendar cells on the booking page.

DOM structure (rifugiolagazuoi.com/EN/disponibilita.php):
  table -> one month calendar
    td.libero -> day with free beds, text starts with the day number
      optional <a onclick=...> wrapping the day; clicking it opens the overlay
    div.reveal-overlay (Foundation reveal)
      .dettagli -> free text with the bed count, e.g. "3 posti letto"

Cells carry no day attribute: the day number is the first line of the
cell text. If the site ever moves it elsewhere those cells silently drop
out of the report.
"""

from typing import Any

from src.rifugio.config import CheckerConfig
from src.rifugio.driver import PageDriver
from src.rifugio.errors import ResultsTableNotFoundError
from src.rifugio.logging import get_logger
from src.rifugio.models import AvailabilityCell, CellClickables
from src.rifugio.parsing import parse_day_label

log = get_logger(__name__)

# Read-only query: every td and the elements inside it a user could click.
COLLECT_CLICKABLES_JS = """
() => Array.from(document.querySelectorAll('td')).map((td, cellIdx) => {
  const clickables = [];
  const add = (el, type) => {
    const rect = el.getBoundingClientRect();
    clickables.push({
      type,
      tag: el.tagName.toLowerCase(),
      text: (el.innerText || '').trim(),
      onclick: el.getAttribute('onclick'),
      href: el.getAttribute('href'),
      datasetKeys: Object.keys(el.dataset),
      role: el.getAttribute('role'),
      style: el.getAttribute('style') || null,
      bbox: { x: rect.x, y: rect.y, w: rect.width, h: rect.height },
    });
  };
  td.querySelectorAll(
    'a, button, [onclick], [role="button"], [data-href], [data-toggle], [tabindex]'
  ).forEach(el => add(el, 'explicit'));
  td.querySelectorAll('*').forEach(el => {
    const s = el.getAttribute('style') || '';
    if (s.includes('cursor:pointer') || s.includes('cursor: pointer')) add(el, 'style-cursor');
  });
  return { cellIdx, html: td.innerHTML, clickables };
})
"""


class AvailabilityPage:
    """Monthly availability calendar.

    Navigates to the configured URL and discovers the cells marked available.
    """

    def __init__(self, driver: PageDriver, config: CheckerConfig) -> None:
        self.driver = driver
        self.config = config

    async def navigate(self) -> None:
        """Load the availability page and wait for the results table.

        Raises:
            PageLoadError: If navigation fails or times out.
            ResultsTableNotFoundError: If no table appears within the timeout.
        """
        url = self.config.rifugio_url
        await self.driver.goto(url, timeout_ms=self.config.navigation_timeout_ms)

        # Attached is enough: the page has tabs, and an earlier table may be hidden.
        table_found = await self.driver.wait_for(
            self.config.results_table_selector,
            state="attached",
            timeout_ms=self.config.table_timeout_ms,
        )
        if not table_found:
            raise ResultsTableNotFoundError(
                f"No {self.config.results_table_selector!r} on {url} "
                f"after {self.config.table_timeout_ms} ms"
            )

        log.info("availability_page_navigated", url=url)

    async def locate_cells(self) -> list[AvailabilityCell]:
        """Return every available cell in document order.

        An empty list is a valid answer: the month may be fully booked.
        """
        handles = await self.driver.query_all(self.config.available_cell_selector)

        cells: list[AvailabilityCell] = []
        for index, handle in enumerate(handles):
            label_text = (await self.driver.inner_text(handle)).strip()
            anchor_href, anchor_text = await read_anchor(self.driver, handle)
            cells.append(
                AvailabilityCell(
                    index=index,
                    label_text=label_text,
                    anchor_href=anchor_href,
                    anchor_text=anchor_text,
                    day=parse_day_label(label_text, anchor_text),
                    handle=handle,
                )
            )

        log.info(
            "available_cells_located",
            count=len(cells),
            days=[c.day for c in cells],
        )
        return cells

    async def collect_clickables(self) -> list[CellClickables]:
        """Describe the clickable elements inside every table cell.

        Diagnostic output only; the reveal loop does not use it.
        """
        raw = await self.driver.evaluate(COLLECT_CLICKABLES_JS)
        cells = [CellClickables.model_validate(item) for item in raw or []]
        log.debug(
            "clickables_collected",
            cells=len(cells),
            clickables=sum(len(c.clickables) for c in cells),
        )
        return cells


async def read_anchor(
    driver: PageDriver, cell_handle: Any
) -> tuple[str | None, str | None]:
    """Read the resolved href and trimmed text of the link inside a cell, if any."""
    anchor = await driver.query_one("a", root=cell_handle)
    if anchor is None:
        return None, None
    href = await driver.get_property(anchor, "href")
    text = (await driver.inner_text(anchor)).strip()
    return href, text
