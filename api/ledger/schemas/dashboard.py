from pydantic import BaseModel, Field

from .transactions import TxOut


class MonthlySummary(BaseModel):
    revenue: int = 0
    expense: int = 0
    balance: int = 0
    total: int = 0


class OverdueOut(BaseModel):
    transaction: TxOut
    days_overdue: int


class DashboardOut(BaseModel):
    month: int
    year: int
    is_past: bool
    is_future: bool
    summary: MonthlySummary
    personal: list[TxOut] = Field(default_factory=list)
    shared: list[TxOut] = Field(default_factory=list)
    overdue: list[OverdueOut] = Field(default_factory=list)
    show_overdue_notice: bool = False


class DailyPoint(BaseModel):
    day: int
    net_cents: int = 0


class ExpenseTotal(BaseModel):
    name: str
    total_cents: int


class AnalyticsOut(BaseModel):
    month: int
    year: int
    revenue: int = 0
    expense: int = 0
    balance: int = 0
    daily: list[DailyPoint] = Field(default_factory=list)
    top_expenses: list[ExpenseTotal] = Field(default_factory=list)
