"""Builders and an in-memory repository shared across the test modules."""

import uuid
from datetime import date

from ledger.errors import NetworkOrServerError
from ledger.schemas.transactions import MonthOut, MonthSummaryOut, TxOut

TODAY = date(2025, 3, 15)


def auth(user_id: str = "alice", session_id: str | None = None) -> dict[str, str]:
    headers = {"X-User-Id": user_id}
    if session_id:
        headers["X-Session-Id"] = session_id
    return headers


def make_month(year: int, month: int, revenue: int = 0, expense: int = 0, accumulated: int = 0, transactions=()) -> MonthOut:
    return MonthOut(
        month=month,
        year=year,
        transactions=list(transactions),
        summary=MonthSummaryOut(
            total_revenue=revenue,
            total_expense=expense,
            monthly_balance=revenue - expense,
            accumulated_balance=accumulated,
        ),
    )


def make_tx(owner_id: str = "alice", kind: str = "expense", amount_cents: int = 100, on: date = TODAY, **extra) -> TxOut:
    return TxOut(
        id=uuid.uuid4(),
        owner_id=owner_id,
        kind=kind,
        name=extra.pop("name", "rent"),
        amount_cents=amount_cents,
        date=on,
        **extra,
    )


class FakeLedgerRepository:
    """In-memory repository; months are seeded directly, writes are recorded."""

    def __init__(self):
        self.months: dict[tuple[int, int], MonthOut] = {}
        self.failing_months: set[tuple[int, int]] = set()
        self.failing_dates: set[date] = set()
        self.fetched: list[tuple[int, int]] = []
        self.created: list[TxOut] = []
        self.deleted: list[uuid.UUID] = []
        self.added: list[tuple[uuid.UUID, str, int]] = []
        self.removed: list[tuple[uuid.UUID, str]] = []

    async def get_month(self, owner_id, month, year, include_shared=True):
        self.fetched.append((year, month))
        if (year, month) in self.failing_months:
            raise NetworkOrServerError("boom")
        return self.months.get((year, month), make_month(year, month))

    def _record(self, payload, kind, **extra) -> TxOut:
        if payload.date in self.failing_dates:
            raise NetworkOrServerError("rejected")
        tx = make_tx(owner_id=payload.owner_id, kind=kind, amount_cents=payload.amount_cents, on=payload.date, name=payload.name, **extra)
        self.created.append(tx)
        return tx

    async def create_simple(self, payload):
        return self._record(payload, payload.kind, status=payload.status)

    async def create_controlled(self, payload):
        return self._record(payload, "revenue", is_controlled=True, counterparty_id=payload.counterparty_id)

    async def update(self, tx_id, owner_id, payload):
        raise NotImplementedError

    async def delete(self, tx_id, owner_id):
        self.deleted.append(tx_id)

    async def set_status(self, tx_id, owner_id, status):
        raise NotImplementedError

    async def add_value(self, tx_id, owner_id, description, amount_cents):
        self.added.append((tx_id, description, amount_cents))

    async def remove_value(self, tx_id, owner_id, description):
        self.removed.append((tx_id, description))


