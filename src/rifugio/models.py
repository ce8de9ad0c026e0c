"""Pydantic models for availability data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Records are frozen once built: cells are discovered once per page load and each
reveal result is produced exactly once.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.rifugio.parsing import parse_capacity

UNAVAILABLE = "unavailable"

# day of month -> free beds, None when the overlay gave no number
DayCapacityTable = dict[int, int | None]

# (day, beds or UNAVAILABLE) in ascending day order
AvailabilityReport = list[tuple[int, int | str]]


class AvailabilityCell(BaseModel):
    """A calendar cell the booking page marks as available (td.libero).

    Cells are numbered in document order. The day number is parsed from the
    cell label at discovery so later steps never rely on list position.
    """

    model_config = ConfigDict(frozen=True)

    index: int
    label_text: str = ""  # innerText of the td, trimmed
    anchor_href: str | None = None  # resolved href of the wrapped <a>, if any
    anchor_text: str | None = None
    day: int | None = None  # None when the label has no leading number
    handle: Any = Field(default=None, exclude=True, repr=False)


class RevealResult(BaseModel):
    """Outcome of opening one cell's detail overlay."""

    model_config = ConfigDict(frozen=True)

    cell_index: int
    day: int | None = None
    label_text: str = ""
    anchor_href: str | None = None
    anchor_text: str | None = None
    revealed_text: str | None = None
    capacity: int | None = None

    @classmethod
    def from_reveal(
        cls,
        cell: AvailabilityCell,
        revealed_text: str | None,
        *,
        label_text: str | None = None,
        anchor_href: str | None = None,
        anchor_text: str | None = None,
    ) -> "RevealResult":
        """Build a result, deriving capacity from the overlay text only."""
        return cls(
            cell_index=cell.index,
            day=cell.day,
            label_text=cell.label_text if label_text is None else label_text,
            anchor_href=anchor_href if anchor_href is not None else cell.anchor_href,
            anchor_text=anchor_text if anchor_text is not None else cell.anchor_text,
            revealed_text=revealed_text,
            capacity=parse_capacity(revealed_text),
        )


class CloseOutcome(BaseModel):
    """How closing the overlay went.

    method records what was clicked: a close control, the overlay background,
    or nothing because no overlay element was found.
    """

    model_config = ConfigDict(frozen=True)

    closed: bool
    method: Literal["button", "background", "none"] = "none"


class BoundingBox(BaseModel):
    x: float = 0
    y: float = 0
    w: float = 0
    h: float = 0


class ClickableElement(BaseModel):
    """An interactive descendant of a table cell, as seen by the browser."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["explicit", "style-cursor"]
    tag: str
    text: str = ""
    onclick: str | None = None
    href: str | None = None
    dataset_keys: list[str] = Field(default_factory=list, alias="datasetKeys")
    role: str | None = None
    style: str | None = None
    bbox: BoundingBox = Field(default_factory=BoundingBox)


class CellClickables(BaseModel):
    """All clickable elements found inside one td (diagnostics only)."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIdx")
    html: str = ""
    clickables: list[ClickableElement] = Field(default_factory=list)


class CheckRun(BaseModel):
    """Everything one availability check produced."""

    cells: list[AvailabilityCell]
    results: list[RevealResult]
    close_outcomes: list[CloseOutcome]
    table: DayCapacityTable
    report: AvailabilityReport
    clickables: list[CellClickables] | None = None
    last_dialog: str | None = None
