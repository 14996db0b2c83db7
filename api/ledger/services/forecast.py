"""Running-total projection for the current month and months after it."""

import logging
from collections.abc import Awaitable, Callable
from datetime import date

from ledger.errors import LedgerError
from ledger.schemas.transactions import MonthOut
from ledger.services.months import iter_months

logger = logging.getLogger(__name__)

MonthFetcher = Callable[[int, int], Awaitable[MonthOut]]


def month_delta(data: MonthOut) -> int:
    return (data.summary.total_revenue or 0) - (data.summary.total_expense or 0)


async def forecast_total(
    today: date,
    viewed_year: int,
    viewed_month: int,
    viewed_data: MonthOut,
    current_data: MonthOut,
    fetch_month: MonthFetcher,
) -> int:
    """Project the running total as of the viewed month.

    Starts from the authoritative balance before today's month and adds each
    month's revenue - expense from today's month through the viewed month.
    Months in between are fetched one at a time; a month whose fetch fails
    adds nothing.
    """
    current = current_data.summary
    total = (current.accumulated_balance or 0) - (current.monthly_balance or 0)

    for year, month in iter_months(today, date(viewed_year, viewed_month, 1)):
        if (year, month) == (viewed_year, viewed_month):
            data = viewed_data
        elif (year, month) == (today.year, today.month):
            data = current_data
        else:
            try:
                data = await fetch_month(year, month)
            except LedgerError as e:
                logger.warning("Skipping %04d-%02d in forecast: %s", year, month, e.message)
                continue
        total += month_delta(data)

    return total
