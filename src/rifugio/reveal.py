"""RevealExtractor - opens each available cell's overlay and reads the bed count.

Per cell, strictly one at a time (the overlay is a single shared element):

    Idle -> Clicked -> OverlayWait -> Read -> Closing -> Done

Every step is best effort. A cell whose overlay never shows up yields a
result with no revealed text; nothing raised while handling one cell
escapes it. Closing reports a CloseOutcome so the caller can decide what
to do about an overlay that stayed open.
"""

from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.rifugio.config import CheckerConfig
from src.rifugio.driver import PageDriver
from src.rifugio.errors import OverlayStuckError
from src.rifugio.logging import get_logger
from src.rifugio.models import AvailabilityCell, CloseOutcome, RevealResult
from src.rifugio.pages.availability import read_anchor

log = get_logger(__name__)


class RevealExtractor:
    """Runs the click -> wait -> read -> close protocol against a PageDriver."""

    def __init__(self, driver: PageDriver, config: CheckerConfig) -> None:
        self.driver = driver
        self.config = config

    async def reveal(self, cell: AvailabilityCell) -> tuple[RevealResult, CloseOutcome]:
        """Reveal one cell's overlay and close it again.

        Returns:
            The cell's RevealResult and how closing the overlay went.
        """
        cell_log = log.bind(cell_index=cell.index, day=cell.day)
        revealed_text: str | None = None

        try:
            target = await self._click_target(cell)
            await self._click(target, cell_log)
            revealed_text = await self._wait_and_read()
        except Exception as e:
            cell_log.warning("reveal_failed", error=str(e), type=type(e).__name__)

        try:
            close = await self.close_overlay()
        except Exception as e:
            cell_log.warning("close_failed", error=str(e), type=type(e).__name__)
            close = CloseOutcome(closed=False)

        result = await self._build_result(cell, revealed_text)
        cell_log.debug(
            "cell_revealed",
            revealed_text=revealed_text,
            capacity=result.capacity,
            closed=close.closed,
        )
        return result, close

    async def _click_target(self, cell: AvailabilityCell) -> Any:
        anchor = await self.driver.query_one("a", root=cell.handle)
        return anchor if anchor is not None else cell.handle

    async def _click(self, target: Any, cell_log) -> bool:
        """Native click, then an in-page el.click() if that raised.

        Returns False when both failed; the overlay wait still runs since
        the page may have reacted anyway.
        """
        try:
            await self.driver.click(target, timeout_ms=self.config.overlay_timeout_ms)
            return True
        except Exception as e:
            cell_log.debug(
                "native_click_failed",
                error=str(e),
                bbox=await self._safe_bbox(target),
            )

        try:
            await self.driver.dispatch_click(target)
            return True
        except Exception as e:
            cell_log.warning("click_failed", error=str(e))
            return False

    async def _safe_bbox(self, target: Any) -> dict[str, float] | None:
        try:
            return await self.driver.bounding_box(target)
        except Exception:
            return None

    async def _wait_and_read(self) -> str | None:
        """Wait for the overlay and read its detail text.

        First waits for the detail element itself to be visible. Failing that,
        waits for the overlay container alone and reads the detail element if
        it exists at all (it may be present but styled invisible).
        """
        detail_visible = await self.driver.wait_for(
            self.config.overlay_detail_selector,
            state="visible",
            timeout_ms=self.config.overlay_timeout_ms,
        )
        if detail_visible:
            return await self._read_detail()

        overlay_visible = await self.driver.wait_for(
            self.config.overlay_selector,
            state="visible",
            timeout_ms=self.config.overlay_timeout_ms,
        )
        if not overlay_visible:
            log.info("overlay_not_shown")
            return None

        try:
            return await self._read_detail()
        except Exception as e:
            log.debug("detail_read_failed", error=str(e))
            return None

    async def _read_detail(self) -> str | None:
        detail = await self.driver.query_one(self.config.overlay_detail_selector)
        if detail is None:
            return None
        text = (await self.driver.inner_text(detail)).strip()
        return text or None

    async def close_overlay(self, *, timeout_ms: int | None = None) -> CloseOutcome:
        """Close the overlay and wait for it to hide.

        Clicks the first close control found, else the overlay background,
        then presses Escape.
        """
        method = "none"
        try:
            method = await self._click_close()
        except Exception as e:
            log.debug("close_click_failed", error=str(e))

        try:
            await self.driver.press("Escape")
        except Exception as e:
            log.debug("escape_failed", error=str(e))

        closed = await self.driver.wait_for(
            self.config.overlay_selector,
            state="hidden",
            timeout_ms=self.config.close_timeout_ms if timeout_ms is None else timeout_ms,
        )
        return CloseOutcome(closed=closed, method=method)

    async def _click_close(self) -> str:
        for selector in self.config.close_selectors:
            button = await self.driver.query_one(selector)
            if button is not None:
                await self.driver.dispatch_click(button)
                return "button"

        overlay = await self.driver.query_one(self.config.overlay_selector)
        if overlay is not None:
            await self.driver.dispatch_click(overlay)
            return "background"
        return "none"

    async def recover_overlay(self) -> CloseOutcome:
        """Retry closing a stuck overlay with the longer hide timeout.

        Raises:
            OverlayStuckError: If the overlay is still visible after every attempt.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.config.close_recovery_attempts),
            wait=wait_fixed(0.5),
            retry=retry_if_exception_type(OverlayStuckError),
            reraise=True,
        ):
            with attempt:
                outcome = await self.close_overlay(
                    timeout_ms=self.config.close_recovery_timeout_ms
                )
                if not outcome.closed:
                    raise OverlayStuckError(
                        f"Overlay still visible after {self.config.close_recovery_timeout_ms} ms"
                    )
        log.info("overlay_recovered", method=outcome.method)
        return outcome

    async def _build_result(
        self, cell: AvailabilityCell, revealed_text: str | None
    ) -> RevealResult:
        """Re-read the cell after the reveal; keep discovery values if that fails."""
        label_text = anchor_href = anchor_text = None
        try:
            label_text = (await self.driver.inner_text(cell.handle)).strip()
            anchor_href, anchor_text = await read_anchor(self.driver, cell.handle)
        except Exception as e:
            log.debug("cell_reread_failed", cell_index=cell.index, error=str(e))

        return RevealResult.from_reveal(
            cell,
            revealed_text,
            label_text=label_text,
            anchor_href=anchor_href,
            anchor_text=anchor_text,
        )
