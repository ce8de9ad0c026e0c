"""Error hierarchy for availability checking.

Fatal errors (page never loads, results table never appears) abort the run.
Per-cell problems are caught where they happen and degrade to missing data,
so they never reach this hierarchy except for a stuck overlay, which the
checker retries with tenacity:

    @retry(retry=retry_if_exception_type(OverlayStuckError), stop=stop_after_attempt(2))
    async def recover_overlay(self):
        ...
"""


class ScrapingError(Exception):
    """Base exception for all scraping errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry.

    Examples: navigation timeouts, an overlay that has not closed yet.
    """

    pass


class PageLoadError(TransientError):
    """The availability page could not be loaded.

    Fatal for a run: full page reloads are never retried.
    """

    pass


class OverlayStuckError(TransientError):
    """The detail overlay is still visible after every close attempt."""

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry.

    Examples: the page markup no longer contains the expected elements.
    """

    pass


class ResultsTableNotFoundError(PermanentError):
    """The availability table never appeared on the loaded page."""

    pass
