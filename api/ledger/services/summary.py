from ledger.schemas.dashboard import MonthlySummary
from ledger.schemas.transactions import MonthOut


def summarize_past(data: MonthOut) -> MonthlySummary:
    """Past months trust the repository's own balances."""
    s = data.summary
    return MonthlySummary(
        revenue=s.total_revenue or 0,
        expense=s.total_expense or 0,
        balance=s.monthly_balance or 0,
        total=s.accumulated_balance or 0,
    )


def summarize_projected(data: MonthOut, forecast_total: int) -> MonthlySummary:
    s = data.summary
    revenue = s.total_revenue or 0
    expense = s.total_expense or 0
    return MonthlySummary(
        revenue=revenue,
        expense=expense,
        balance=revenue - expense,
        total=forecast_total,
    )
