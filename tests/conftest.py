import pytest
import structlog
from structlog.testing import capture_logs


@pytest.fixture(autouse=True)
def captured_logs():
    """Keep structlog output out of stdout and let tests inspect events."""
    with capture_logs() as logs:
        yield logs
    structlog.contextvars.clear_contextvars()
