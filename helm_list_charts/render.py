"""
Table rendering for chart listings.

Rows are aligned by terminal display width, so wide characters in chart
descriptions do not break the column layout.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Sequence

from wcwidth import wcswidth

from .common import ListChartsError
from .grouping import ChartGroup
from .index import ChartEntry


HEADERS = ("CHART", "TYPE", "VERSION", "DESCRIPTION", "APP VERSION", "CREATED", "KUBE VERSION")
PLACEHOLDER = "<unspecified>"
COLUMN_PAD = 2

# RFC 3339 timestamp; fractions longer than microseconds are cut to fit datetime
RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


class RenderError(ListChartsError):
    """Raised when rows cannot be laid out as a table."""
    pass


@dataclass(frozen=True)
class RenderedTable:
    """
    Formatted listing ready for output.

    Attributes:
        header: Column titles
        rows: Cell values per row
        lines: Aligned text lines, header first
    """
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    lines: tuple[str, ...]

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"

    @property
    def is_empty(self) -> bool:
        return not self.rows


def display_width(text: str) -> int:
    """Terminal column width of `text`."""
    width = wcswidth(text)
    if width < 0:
        width = len(text)  # non-printable characters
    return width


def parse_timestamp(text: str) -> datetime.datetime | None:
    """Parse an RFC 3339 timestamp, allowing nanosecond precision."""
    match = RFC3339_RE.match(text.strip())
    if not match:
        return None
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    fraction = (match.group("fraction") or "0")[:6].ljust(6, "0")
    base = match.group("base").replace("t", "T").replace(" ", "T")
    try:
        return datetime.datetime.fromisoformat(f"{base}.{fraction}{offset}")
    except ValueError:
        return None


def format_created(
    value: datetime.datetime | str | None,
    tz: datetime.tzinfo | None = None,
) -> str:
    """
    Format a creation timestamp for display.

    Args:
        value: Timestamp from the index (datetime or RFC 3339 text)
        tz: Target timezone (local time if None)

    Returns:
        e.g. "Feb 13, 2025 12:42 pm"; unparseable text is returned as is,
        missing values as the placeholder
    """
    if value is None or value == "":
        return PLACEHOLDER
    if isinstance(value, datetime.datetime):
        dt = value
        if dt.tzinfo is None:
            # YAML timestamps without offset are UTC
            dt = dt.replace(tzinfo=datetime.timezone.utc)
    else:
        dt = parse_timestamp(value)
        if dt is None:
            return value
    dt = dt.astimezone(tz)
    hour = dt.hour % 12 or 12
    meridiem = "am" if dt.hour < 12 else "pm"
    return f"{dt.strftime('%b')} {dt.day}, {dt.year} {hour}:{dt.minute:02d} {meridiem}"


def ellipsize(text: str, max_chars: int) -> str:
    """
    Shorten text to at most `max_chars` characters plus "...".

    Cuts at the last space inside the limit so words are not split.
    """
    if len(text) <= max_chars:
        return text
    taken = text[:max_chars]
    if text[max_chars] != " ":
        pos = taken.rfind(" ")
        if pos > 0:
            taken = taken[:pos]
    return f"{taken.rstrip()}..."


def _cell(value: str | None) -> str:
    return value if value else PLACEHOLDER


def entry_row(
    entry: ChartEntry,
    tz: datetime.tzinfo | None = None,
    description_width: int | None = None,
) -> tuple[str, ...]:
    """Build the table cells for one chart entry."""
    description = entry.description
    if description:
        # Tabs and newlines would break column alignment
        description = " ".join(description.split())
        if description_width:
            description = ellipsize(description, description_width)
    return (
        entry.name,
        _cell(entry.chart_type),
        entry.version_text,
        _cell(description),
        _cell(entry.app_version),
        format_created(entry.created, tz),
        _cell(entry.kube_version),
    )


def build_rows(
    groups: Sequence[ChartGroup],
    tz: datetime.tzinfo | None = None,
    description_width: int | None = None,
) -> list[tuple[str, ...]]:
    """Flatten grouped entries into table rows, preserving group order."""
    return [
        entry_row(entry, tz, description_width)
        for group in groups
        for entry in group.entries
    ]


def compute_col_widths(rows: Sequence[Sequence[str]]) -> list[int]:
    if not rows:
        return []
    widths = [0] * len(rows[0])
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], display_width(cell))
    return widths


def format_rows(rows: Sequence[Sequence[str]], pad: int = COLUMN_PAD) -> list[str]:
    """
    Align rows into columns.

    Args:
        rows: Cell rows, header first
        pad: Spaces between columns

    Returns:
        Text lines without trailing whitespace

    Raises:
        RenderError: If rows differ in cell count
    """
    if not rows:
        return []
    ncol = len(rows[0])
    for index, row in enumerate(rows):
        if len(row) != ncol:
            raise RenderError(
                f"Row {index} has {len(row)} cells, expected {ncol}"
            )

    widths = compute_col_widths(rows)
    lines = []
    for row in rows:
        cells = [
            cell + " " * (widths[i] - display_width(cell))
            for i, cell in enumerate(row)
        ]
        lines.append((" " * pad).join(cells).rstrip())
    return lines


def render_table(
    groups: Sequence[ChartGroup],
    tz: datetime.tzinfo | None = None,
    description_width: int | None = None,
) -> RenderedTable:
    """
    Render chart groups as an aligned table.

    Args:
        groups: Chart groups in display order
        tz: Timezone for the CREATED column (local time if None)
        description_width: Ellipsize descriptions beyond this many characters

    Returns:
        RenderedTable (header only when there are no groups)
    """
    rows = build_rows(groups, tz, description_width)
    lines = format_rows([HEADERS, *rows])
    return RenderedTable(header=HEADERS, rows=tuple(rows), lines=tuple(lines))
