"""Timestamp scanning and total build duration."""

import calendar
import logging
from datetime import MINYEAR, datetime, timedelta

from builddoctor.patterns import (
    LINE_BREAK,
    SPACE_DATE_TIME,
    SPACE_LAYOUT,
    TIMESTAMP,
    TIMESTAMP_LAYOUTS,
)

logger = logging.getLogger(__name__)

_ONE_MS = timedelta(milliseconds=1)


def clamp_day(text: str) -> str | None:
    """Pull an overflowing day back to the month's last day.

    ``2024-02-30 10:00:00`` becomes ``2024-02-29 10:00:00``. Returns None
    when the text is not space-separated, the month is outside 1-12, the
    day is outside 1-31, or the day already fits the month.
    """
    m = SPACE_DATE_TIME.fullmatch(text)
    if not m:
        return None
    year, month, day = (int(g) for g in m.groups())
    if year < MINYEAR or not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    last = calendar.monthrange(year, month)[1]
    if day <= last:
        return None
    return f"{text[:8]}{last:02d}{text[10:]}"


def parse_timestamp(text: str) -> datetime | None:
    """Parse a date-time candidate against each known layout, first hit wins.

    Layouts: millisecond UTC (``...T12:00:00.000Z``), space-separated
    (day overflow clamped), then ISO-8601 local date-time (strict).
    """
    for layout in TIMESTAMP_LAYOUTS:
        try:
            return datetime.strptime(text, layout)
        except ValueError:
            if layout != SPACE_LAYOUT:
                continue
        clamped = clamp_day(text)
        if clamped is None:
            continue
        try:
            return datetime.strptime(clamped, SPACE_LAYOUT)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def scan_timestamps(content: str) -> list[datetime]:
    """Collect one timestamp per line, in the order the lines appear.

    Only the first date-time-shaped substring of a line is considered.
    Candidates that no layout accepts (e.g. ``2024-13-45 99:00:00``) are
    skipped.
    """
    found: list[datetime] = []
    for lineno, line in enumerate(LINE_BREAK.split(content), 1):
        m = TIMESTAMP.search(line)
        if not m:
            continue
        ts = parse_timestamp(m.group(0))
        if ts is None:
            logger.debug("Skipping unparseable timestamp %r on line %d", m.group(0), lineno)
            continue
        found.append(ts)
    return found


def calculate_total_duration(content: str) -> int | None:
    """Milliseconds between the first and last timestamp encountered.

    Uses encounter order, not chronological order: a log whose timestamps
    go backwards yields a negative duration. Returns None when fewer than
    two timestamps are found.
    """
    timestamps = scan_timestamps(content)
    if len(timestamps) < 2:
        return None
    return (timestamps[-1] - timestamps[0]) // _ONE_MS
