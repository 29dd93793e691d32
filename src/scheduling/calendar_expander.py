"""
Calendar date-range expansion.

Turns the model's date-grouped assignment blocks into one block per
calendar day, keyed "YYYY-MM-DD", for per-day lookup in month/week/day
views.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from lexical.models import AssignmentBlock

logger = logging.getLogger(__name__)

DayKey = str


def day_key(day: Union[date, datetime]) -> DayKey:
    if isinstance(day, datetime):
        day = day.date()
    return day.isoformat()


def _parse_day(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def expand_blocks(blocks: Iterable[AssignmentBlock]) -> Dict[DayKey, AssignmentBlock]:
    """Expand each block over every day of [startDate, endDate].

    The first block to claim a day is copied with ``start_date`` set to that
    day; its ``end_date`` survives only on the block's own first day. A
    later block landing on a claimed day has its assignments appended unless
    a title equal to the *first* incoming title is already there, in which
    case the whole incoming list is skipped. Blocks without a usable
    ``start_date`` are dropped.
    """
    expanded: Dict[DayKey, AssignmentBlock] = {}

    for block in blocks:
        start = _parse_day(block.start_date)
        if start is None:
            logger.warning(f"Dropping block without a usable startDate: {block.start_date!r}")
            continue
        end = _parse_day(block.end_date) or start
        if block.end_date and _parse_day(block.end_date) is None:
            logger.warning(f"Unparseable endDate {block.end_date!r}; treating block as single-day")

        current = start
        while current <= end:
            key = day_key(current)
            existing = expanded.get(key)
            if existing is None:
                keep_end = current == start and bool(block.end_date)
                expanded[key] = block.model_copy(
                    update={
                        "start_date": key,
                        "end_date": block.end_date if keep_end else None,
                        "assignments": [a.model_copy() for a in block.assignments],
                    }
                )
            else:
                first_title = block.assignments[0].title if block.assignments else None
                if not any(a.title == first_title for a in existing.assignments):
                    existing.assignments.extend(a.model_copy() for a in block.assignments)
            current += timedelta(days=1)

    return expanded


def assignments_for_date(
    expanded: Dict[DayKey, AssignmentBlock], day: Union[date, datetime]
) -> Optional[AssignmentBlock]:
    """The block for ``day``, or None when nothing is due that day."""
    return expanded.get(day_key(day))


def month_grid(year: int, month: int) -> List[List[date]]:
    """Whole Sunday-to-Saturday weeks covering the given month."""
    first = date(year, month, 1)
    next_month = date(year + month // 12, month % 12 + 1, 1)
    last = next_month - timedelta(days=1)

    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday starts the week.
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    end = last + timedelta(days=6 - (last.weekday() + 1) % 7)

    weeks: List[List[date]] = []
    current = start
    while current <= end:
        weeks.append([current + timedelta(days=i) for i in range(7)])
        current += timedelta(days=7)
    return weeks


def week_days(day: Union[date, datetime]) -> List[date]:
    """The Sunday-first week containing ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    sunday = day - timedelta(days=(day.weekday() + 1) % 7)
    return [sunday + timedelta(days=i) for i in range(7)]
