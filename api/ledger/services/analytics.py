"""Per-month charts: net movement per calendar day and the largest expenses by name.

Sums use each record's base amount over every record the month listing
returns, shared ones included.
"""

from collections.abc import Iterable

from ledger.repositories.base import LedgerRepository
from ledger.schemas.dashboard import AnalyticsOut, DailyPoint, ExpenseTotal
from ledger.schemas.transactions import TxOut
from ledger.services.months import month_bounds

TOP_EXPENSES = 5


def signed_amount(tx: TxOut) -> int:
    return tx.amount_cents if tx.kind == "revenue" else -tx.amount_cents


def daily_movement(year: int, month: int, transactions: Iterable[TxOut]) -> list[DailyPoint]:
    """One point per day of the month, zero on days without records."""
    start, next_start = month_bounds(year, month)
    days = {day: 0 for day in range(1, (next_start - start).days + 1)}
    for tx in transactions:
        if (tx.date.year, tx.date.month) == (year, month):
            days[tx.date.day] += signed_amount(tx)
    return [DailyPoint(day=day, net_cents=net) for day, net in days.items()]


def top_expenses(transactions: Iterable[TxOut], limit: int = TOP_EXPENSES) -> list[ExpenseTotal]:
    grouped: dict[str, int] = {}
    for tx in transactions:
        if tx.kind == "expense":
            grouped[tx.name] = grouped.get(tx.name, 0) + tx.amount_cents
    ranked = sorted(grouped.items(), key=lambda item: item[1], reverse=True)
    return [ExpenseTotal(name=name, total_cents=total) for name, total in ranked[:limit]]


async def month_analytics(repository: LedgerRepository, owner_id: str, year: int, month: int) -> AnalyticsOut:
    data = await repository.get_month(owner_id, month, year, include_shared=True)
    txs = data.transactions
    revenue = sum(t.amount_cents for t in txs if t.kind == "revenue")
    expense = sum(t.amount_cents for t in txs if t.kind == "expense")
    return AnalyticsOut(
        month=month,
        year=year,
        revenue=revenue,
        expense=expense,
        balance=revenue - expense,
        daily=daily_movement(year, month, txs),
        top_expenses=top_expenses(txs),
    )
