"""Month view: the viewed month's records plus its summary, past or projected."""

import logging
from dataclasses import dataclass, field
from datetime import date

from ledger.repositories.base import LedgerRepository
from ledger.schemas.dashboard import MonthlySummary
from ledger.schemas.transactions import MonthOut, TxOut
from ledger.services.forecast import forecast_total
from ledger.services.months import MonthClassification, classify
from ledger.services.summary import summarize_past, summarize_projected

logger = logging.getLogger(__name__)


@dataclass
class MonthView:
    year: int
    month: int
    classification: MonthClassification
    summary: MonthlySummary
    data: MonthOut
    personal: list[TxOut] = field(default_factory=list)
    shared: list[TxOut] = field(default_factory=list)


class MonthViewService:
    def __init__(self, repository: LedgerRepository):
        self.repository = repository

    async def month_view(self, owner_id: str, year: int, month: int, today: date) -> MonthView:
        # A failure here is the caller's inline error state
        data = await self.repository.get_month(owner_id, month, year, include_shared=True)
        classification = classify(today, date(year, month, 1))

        if classification.is_past:
            summary = summarize_past(data)
        else:
            if (year, month) == (today.year, today.month):
                current = data
            else:
                current = await self.repository.get_month(owner_id, today.month, today.year, include_shared=True)

            async def fetch(y: int, m: int) -> MonthOut:
                return await self.repository.get_month(owner_id, m, y, include_shared=True)

            total = await forecast_total(today, year, month, data, current, fetch)
            summary = summarize_projected(data, total)
            logger.debug("Projected total for %s %04d-%02d: %d", owner_id, year, month, total)

        return MonthView(
            year=year,
            month=month,
            classification=classification,
            summary=summary,
            data=data,
            personal=[t for t in data.transactions if t.owner_id == owner_id],
            shared=[t for t in data.transactions if t.sharer_id == owner_id],
        )
