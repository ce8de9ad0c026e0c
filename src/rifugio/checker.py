"""AvailabilityChecker - runs one full check on an open browser session.

Locate cells -> reveal each cell in order -> aggregate -> report. The driver
is passed in by the caller, which owns the browser session.
"""

from src.rifugio.config import CheckerConfig
from src.rifugio.driver import PageDriver
from src.rifugio.errors import OverlayStuckError
from src.rifugio.logging import bind_check_context, get_logger
from src.rifugio.models import CheckRun, CloseOutcome, RevealResult
from src.rifugio.pages.availability import AvailabilityPage
from src.rifugio.report import build_day_table, build_report
from src.rifugio.reveal import RevealExtractor

log = get_logger(__name__)


class AvailabilityChecker:
    """Orchestrates locator, extractor and aggregator for one page load."""

    def __init__(self, driver: PageDriver, config: CheckerConfig) -> None:
        self.driver = driver
        self.config = config
        self.page = AvailabilityPage(driver, config)
        self.extractor = RevealExtractor(driver, config)

    async def run(self, *, collect_clickables: bool = False) -> CheckRun:
        """Load the page, reveal every available cell and build the report.

        Args:
            collect_clickables: Also describe every clickable element in the
                table cells (diagnostics).

        Raises:
            PageLoadError: If the page can't be loaded.
            ResultsTableNotFoundError: If the availability table never appears.
        """
        bind_check_context(
            url=self.config.rifugio_url,
            start_day=self.config.start_day,
            end_day=self.config.end_day,
            min_beds=self.config.min_beds,
        )
        await self.page.navigate()

        clickables = None
        if collect_clickables:
            clickables = await self.page.collect_clickables()

        cells = await self.page.locate_cells()

        results: list[RevealResult] = []
        close_outcomes: list[CloseOutcome] = []
        for cell in cells:
            result, close = await self.extractor.reveal(cell)
            if not close.closed:
                close = await self._recover(cell.index, close)
            results.append(result)
            close_outcomes.append(close)

        table = build_day_table(results)
        report = build_report(
            table,
            self.config.start_day,
            self.config.end_day,
            self.config.min_beds,
        )

        log.info(
            "availability_checked",
            cells=len(cells),
            days_known=len(table),
            days_with_beds=sum(1 for v in table.values() if v is not None),
            overlays_left_open=sum(1 for c in close_outcomes if not c.closed),
        )

        return CheckRun(
            cells=cells,
            results=results,
            close_outcomes=close_outcomes,
            table=table,
            report=report,
            clickables=clickables,
            last_dialog=getattr(self.driver, "last_dialog", None),
        )

    async def _recover(self, cell_index: int, close: CloseOutcome) -> CloseOutcome:
        """Give a stuck overlay a longer chance to close before the next cell.

        If it still won't close, carry on: the next reveal may read the
        stale overlay.
        """
        try:
            return await self.extractor.recover_overlay()
        except OverlayStuckError as e:
            log.warning("overlay_stuck", cell_index=cell_index, error=str(e))
            return close
