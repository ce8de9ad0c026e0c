"""Checker configuration loaded from environment variables.

Every field can also be overridden from the command line (see cli.py).
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

DEFAULT_URL = "https://rifugiolagazuoi.com/EN/disponibilita.php?prm=8&chm=-1#TabDisp"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
)


class CheckerConfig(BaseSettings):
    """Checker configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Target page
    rifugio_url: str = Field(
        default=DEFAULT_URL,
        description="Availability page URL (one month of calendar cells)",
    )

    # Query
    start_day: int = Field(
        default=21,
        ge=1,
        le=31,
        description="First day of month to report (inclusive)",
    )
    end_day: int = Field(
        default=21,
        ge=1,
        le=31,
        description="Last day of month to report (inclusive)",
    )
    min_beds: int = Field(
        default=2,
        ge=0,
        description="Minimum number of free beds for a day to count as available",
    )

    # Browser
    headless: bool = Field(
        default=True,
        description="Run Chromium without a visible window",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User agent sent by the browser context",
    )

    # Timeouts (milliseconds)
    navigation_timeout_ms: int = Field(
        default=30000,
        description="Page navigation timeout (waits for network idle)",
    )
    table_timeout_ms: int = Field(
        default=10000,
        description="How long to wait for the results table after navigation",
    )
    overlay_timeout_ms: int = Field(
        default=3000,
        description="How long to wait for the detail overlay after a click",
    )
    close_timeout_ms: int = Field(
        default=3000,
        description="How long to wait for the overlay to hide after closing",
    )
    close_recovery_timeout_ms: int = Field(
        default=6000,
        description="Longer hide wait used when a normal close failed",
    )
    close_recovery_attempts: int = Field(
        default=2,
        ge=1,
        description="Close attempts made by the recovery step",
    )

    # Selectors (override if the booking page markup changes)
    results_table_selector: str = Field(
        default="table",
        description="CSS selector for the availability table",
    )
    available_cell_selector: str = Field(
        default="td.libero",
        description="CSS selector for cells marked as available",
    )
    overlay_selector: str = Field(
        default=".reveal-overlay",
        description="CSS selector for the detail overlay container",
    )
    overlay_detail_selector: str = Field(
        default=".reveal-overlay .dettagli",
        description="CSS selector for the overlay text holding the bed count",
    )
    close_selectors: list[str] = Field(
        default=[
            ".reveal-overlay .close",
            ".reveal-overlay .reveal-close",
            ".reveal-overlay .close-button",
            ".reveal-overlay .primaryClose",
        ],
        description="Close controls tried in order before clicking the overlay background",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level {value!r}")
        return level

    @model_validator(mode="after")
    def _ordered_day_range(self) -> "CheckerConfig":
        if self.start_day > self.end_day:
            raise ValueError(
                f"start_day ({self.start_day}) must not be after end_day ({self.end_day})"
            )
        return self


# Singleton pattern
_config: CheckerConfig | None = None


def get_config() -> CheckerConfig:
    """Get the checker configuration singleton.

    Returns:
        CheckerConfig: Checker configuration instance
    """
    global _config
    if _config is None:
        _config = CheckerConfig()
    return _config
