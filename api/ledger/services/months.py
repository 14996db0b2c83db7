"""Calendar-month helpers and the past / current-or-future classification."""

from collections.abc import Iterator
from datetime import date
from typing import NamedTuple

from dateutil.relativedelta import relativedelta


class MonthClassification(NamedTuple):
    is_past: bool
    is_future: bool


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return ``[start, next_start)`` for the given calendar month."""
    start = date(year, month, 1)
    return start, start + relativedelta(months=1)


def add_months(d: date, months: int) -> date:
    """Shift ``d`` by whole calendar months, clamping the day to the month's end.

    2024-01-31 plus one month is 2024-02-29, plus two is 2024-03-31.
    """
    return d + relativedelta(months=months)


def iter_months(start: date, end: date) -> Iterator[tuple[int, int]]:
    """Yield ``(year, month)`` from ``start``'s month through ``end``'s month inclusive."""
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current.year, current.month
        current = current + relativedelta(months=1)


def classify(today: date, viewed: date) -> MonthClassification:
    """Classify ``viewed`` relative to ``today``.

    The current month counts as future: it goes through the same forecast
    replay as the months after it, never through the past-month path.
    """
    today_m = month_start(today)
    viewed_m = month_start(viewed)
    is_past = viewed_m.year < today_m.year or (
        viewed_m.year == today_m.year and viewed_m.month < today_m.month
    )
    return MonthClassification(is_past=is_past, is_future=not is_past)
