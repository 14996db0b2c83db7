import datetime as dt
from typing import Literal
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, conint, constr, model_validator


Kind = Literal["revenue", "expense"]
Status = Literal["unpaid", "paid"]


class AdditionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    description: str
    amount_cents: int
    removed: bool = False


class TxOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    kind: Kind
    name: str
    amount_cents: int
    date: dt.date
    is_controlled: bool = False
    counterparty_id: str | None = None
    status: Status = "unpaid"
    control_id: UUID | None = None
    sharer_id: str | None = None  # set when visible to the viewer through a share
    aggregate: bool | None = None
    additions: list[AdditionOut] = Field(default_factory=list)
    paid_amount_cents: int = 0


class MonthSummaryOut(BaseModel):
    total_revenue: int = 0
    total_expense: int = 0
    monthly_balance: int = 0
    accumulated_balance: int = 0  # revenue - expense over every month up to and including this one


class MonthOut(BaseModel):
    month: int
    year: int
    transactions: list[TxOut] = Field(default_factory=list)
    summary: MonthSummaryOut = Field(default_factory=MonthSummaryOut)


class SimpleTxIn(BaseModel):
    owner_id: str | None = None
    kind: Kind
    name: constr(min_length=1, max_length=200)
    amount_cents: conint(gt=0)
    date: dt.date
    status: Status = "unpaid"


class ControlledTxIn(BaseModel):
    """A debt binding owner and counterparty; always starts unpaid."""

    owner_id: str | None = None
    counterparty_id: constr(min_length=1, max_length=64)
    name: constr(min_length=1, max_length=200)
    amount_cents: conint(gt=0)
    date: dt.date


class TxUpdate(BaseModel):
    name: constr(min_length=1, max_length=200) | None = None
    amount_cents: conint(gt=0) | None = None
    date: dt.date | None = None
    status: Status | None = None


class TransactionDraft(BaseModel):
    """A user-entered transaction before it is submitted to the repository."""

    kind: Kind = "expense"
    name: constr(min_length=1, max_length=200)
    amount_cents: conint(gt=0)
    date: dt.date
    is_controlled: bool = False
    counterparty_id: str | None = None
    status: Status = "unpaid"

    @model_validator(mode="after")
    def check_counterparty(self) -> "TransactionDraft":
        if self.is_controlled and not self.counterparty_id:
            raise ValueError("controlled transactions need a counterparty_id")
        if not self.is_controlled and self.counterparty_id:
            raise ValueError("counterparty_id is only allowed on controlled transactions")
        return self

    def to_payload(self, owner_id: str) -> SimpleTxIn | ControlledTxIn:
        if self.is_controlled:
            return ControlledTxIn(
                owner_id=owner_id,
                counterparty_id=self.counterparty_id,
                name=self.name,
                amount_cents=self.amount_cents,
                date=self.date,
            )
        return SimpleTxIn(
            owner_id=owner_id,
            kind=self.kind,
            name=self.name,
            amount_cents=self.amount_cents,
            date=self.date,
            status=self.status,
        )


class RecurringTxIn(TransactionDraft):
    repeat_count: conint(ge=0) = 0


class StatusRequest(BaseModel):
    status: Status


class AddValueRequest(BaseModel):
    description: constr(min_length=1, max_length=200)
    amount_cents: conint(gt=0)


class SubtractValueRequest(BaseModel):
    description: constr(min_length=1, max_length=200)
