"""Text parsers for cell labels and overlay copy. Pure functions, no I/O."""

import re

# Bed-count keywords in the page's two languages. "posti letto" before
# "posti" so the longer phrase wins when both would match. Digits are ASCII
# only; whitespace includes non-breaking spaces.
_KEYWORD_CAPACITY = re.compile(
    r"(?<![0-9])([0-9]+)\s*(?:posti letto|posti|beds?)",
    re.IGNORECASE,
)
_FIRST_NUMBER = re.compile(r"[0-9]+")
_LEADING_NUMBER = re.compile(r"^\s*([0-9]+)")


def parse_capacity(text: str | None) -> int | None:
    """Extract a bed count from free-form overlay text.

    A number followed by a bed keyword ("3 beds", "5 posti letto") is preferred;
    otherwise the first number in the text is used. Text without digits gives None.
    """
    if text is None:
        return None

    match = _KEYWORD_CAPACITY.search(text)
    if match:
        return int(match.group(1))

    match = _FIRST_NUMBER.search(text)
    if match:
        return int(match.group(0))

    return None


def day_label(label_text: str | None, anchor_text: str | None = None) -> str | None:
    """Pick the text a cell's day number is read from.

    First line of the cell text, or the link text when the cell text is empty.
    """
    if label_text:
        first_line = label_text.split("\n")[0]
        if first_line:
            return first_line
    return anchor_text or None


def parse_day_label(label_text: str | None, anchor_text: str | None = None) -> int | None:
    """Parse the day of month from a cell's label.

    Only the leading digits of the label count: "21\\n3 beds" -> 21,
    "21 Mon" -> 21, "Mon 21" -> None.
    """
    label = day_label(label_text, anchor_text)
    if label is None:
        return None

    match = _LEADING_NUMBER.match(label)
    if match is None:
        return None
    return int(match.group(1))
