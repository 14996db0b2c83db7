import logging
import threading
import uuid
from datetime import date
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from starlette.concurrency import run_in_threadpool

from ledger.errors import NetworkOrServerError, NotFoundError, ValidationFailedError
from ledger.models.audit import AuditLog
from ledger.models.base import utcnow
from ledger.models.share import Share
from ledger.models.transaction import Addition, Transaction
from ledger.schemas.transactions import (
    ControlledTxIn,
    MonthOut,
    MonthSummaryOut,
    SimpleTxIn,
    Status,
    TxOut,
    TxUpdate,
)
from ledger.services.additions import check_can_append, effective_amount, find_removable, validate_addition
from ledger.services.months import month_bounds

logger = logging.getLogger(__name__)


class SqlLedgerRepository:
    """Ledger Repository backed by a SQLAlchemy session.

    Controlled transactions are stored as a pair (the owner's revenue and the
    counterparty's expense) sharing one ``control_id``. Edits, status changes,
    deletes and additions apply to the whole pair.

    Session work runs in the threadpool, one call at a time per repository,
    so the event loop never waits on the database.
    """

    def __init__(self, db: Session):
        self.db = db
        self._lock = threading.Lock()

    async def _run(self, fn, *args):
        return await run_in_threadpool(self._serialized, fn, *args)

    def _serialized(self, fn, *args):
        with self._lock:
            return fn(*args)

    # Reads

    def _shared_owners(self, viewer_id: str) -> dict[str, bool]:
        rows = self.db.query(Share.owner_id, Share.aggregate).filter(Share.sharee_id == viewer_id).all()
        return {owner_id: aggregate for owner_id, aggregate in rows}

    def _signed_total(self, owner_ids: list[str], before: date) -> int:
        sign = sa.case((Transaction.kind == "revenue", 1), else_=-1)
        base = (
            self.db.query(sa.func.coalesce(sa.func.sum(Transaction.amount_cents * sign), 0))
            .filter(
                Transaction.owner_id.in_(owner_ids),
                Transaction.deleted_at.is_(None),
                Transaction.date < before,
            )
            .scalar()
        )
        extra = (
            self.db.query(sa.func.coalesce(sa.func.sum(Addition.amount_cents * sign), 0))
            .join(Transaction, Addition.transaction_id == Transaction.id)
            .filter(
                Transaction.owner_id.in_(owner_ids),
                Transaction.deleted_at.is_(None),
                Transaction.date < before,
                Addition.removed.is_(False),
            )
            .scalar()
        )
        return int(base or 0) + int(extra or 0)

    def _month(self, owner_id: str, month: int, year: int, include_shared: bool) -> MonthOut:
        start, next_start = month_bounds(year, month)
        shares = self._shared_owners(owner_id) if include_shared else {}

        rows = (
            self.db.query(Transaction)
            .options(selectinload(Transaction.additions))
            .filter(
                Transaction.owner_id.in_([owner_id, *shares]),
                Transaction.deleted_at.is_(None),
                Transaction.date >= start,
                Transaction.date < next_start,
            )
            .order_by(Transaction.date, Transaction.created_at)
            .all()
        )

        revenue = 0
        expense = 0
        out: list[TxOut] = []
        for t in rows:
            tx = TxOut.model_validate(t)
            counted = True
            if t.owner_id != owner_id:
                aggregate = shares[t.owner_id]
                tx = tx.model_copy(update={"sharer_id": owner_id, "aggregate": aggregate})
                counted = aggregate
            if counted:
                amount = effective_amount(t.amount_cents, t.additions)
                if t.kind == "revenue":
                    revenue += amount
                else:
                    expense += amount
            out.append(tx)

        summed_owners = [owner_id, *(o for o, aggregate in shares.items() if aggregate)]
        return MonthOut(
            month=month,
            year=year,
            transactions=out,
            summary=MonthSummaryOut(
                total_revenue=revenue,
                total_expense=expense,
                monthly_balance=revenue - expense,
                accumulated_balance=self._signed_total(summed_owners, next_start),
            ),
        )

    async def get_month(self, owner_id: str, month: int, year: int, include_shared: bool = True) -> MonthOut:
        return await self._run(self._month, owner_id, month, year, include_shared)

    # Writes

    def _get_owned(self, tx_id: UUID, owner_id: str) -> Transaction:
        t = self.db.get(Transaction, tx_id)
        if not t or t.deleted_at is not None or t.owner_id != owner_id:
            raise NotFoundError("Transaction not found")
        return t

    def _group(self, t: Transaction) -> list[Transaction]:
        if t.control_id is None:
            return [t]
        return (
            self.db.query(Transaction)
            .filter(Transaction.control_id == t.control_id, Transaction.deleted_at.is_(None))
            .all()
        )

    def _audit(self, owner_id: str, action: str, entity_type: str, entity_id: UUID | None, diff: dict) -> None:
        self.db.add(
            AuditLog(
                owner_id=owner_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                diff_json=diff,
            )
        )

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Ledger write failed: %s", e)
            raise NetworkOrServerError("Could not save changes") from e

    @staticmethod
    def _apply_status(t: Transaction, status: str) -> None:
        t.status = status
        t.paid_amount_cents = effective_amount(t.amount_cents, t.additions) if status == "paid" else 0

    def _create_simple(self, payload: SimpleTxIn) -> TxOut:
        if not payload.owner_id:
            raise ValidationFailedError("owner_id is required")
        t = Transaction(
            owner_id=payload.owner_id,
            kind=payload.kind,
            name=payload.name,
            amount_cents=payload.amount_cents,
            date=payload.date,
            is_controlled=False,
            status=payload.status,
            paid_amount_cents=payload.amount_cents if payload.status == "paid" else 0,
        )
        self.db.add(t)
        self._commit()
        self.db.refresh(t)
        return TxOut.model_validate(t)

    async def create_simple(self, payload: SimpleTxIn) -> TxOut:
        return await self._run(self._create_simple, payload)

    def _create_controlled(self, payload: ControlledTxIn) -> TxOut:
        if not payload.owner_id:
            raise ValidationFailedError("owner_id is required")
        if payload.counterparty_id == payload.owner_id:
            raise ValidationFailedError("A controlled transaction needs a different counterparty")
        control_id = uuid.uuid4()
        t1 = Transaction(
            owner_id=payload.owner_id,
            kind="revenue",
            name=payload.name,
            amount_cents=payload.amount_cents,
            date=payload.date,
            is_controlled=True,
            counterparty_id=payload.counterparty_id,
            status="unpaid",
            control_id=control_id,
        )
        t2 = Transaction(
            owner_id=payload.counterparty_id,
            kind="expense",
            name=payload.name,
            amount_cents=payload.amount_cents,
            date=payload.date,
            is_controlled=True,
            counterparty_id=payload.owner_id,
            status="unpaid",
            control_id=control_id,
        )
        self.db.add_all([t1, t2])
        self._commit()
        self.db.refresh(t1)
        return TxOut.model_validate(t1)

    async def create_controlled(self, payload: ControlledTxIn) -> TxOut:
        return await self._run(self._create_controlled, payload)

    def _update(self, tx_id: UUID, owner_id: str, payload: TxUpdate) -> TxOut:
        t = self._get_owned(tx_id, owner_id)
        for row in self._group(t):
            if payload.name is not None:
                row.name = payload.name
            if payload.amount_cents is not None:
                row.amount_cents = payload.amount_cents
            if payload.date is not None:
                row.date = payload.date
            if payload.status is not None:
                self._apply_status(row, payload.status)
            elif row.status == "paid":
                self._apply_status(row, "paid")
        self._commit()
        self.db.refresh(t)
        return TxOut.model_validate(t)

    async def update(self, tx_id: UUID, owner_id: str, payload: TxUpdate) -> TxOut:
        return await self._run(self._update, tx_id, owner_id, payload)

    def _delete(self, tx_id: UUID, owner_id: str) -> None:
        t = self._get_owned(tx_id, owner_id)
        now = utcnow()
        group = self._group(t)
        for row in group:
            row.deleted_at = now
        self._audit(owner_id, "delete", "transaction", t.id, {"ids": [str(row.id) for row in group]})
        self._commit()

    async def delete(self, tx_id: UUID, owner_id: str) -> None:
        await self._run(self._delete, tx_id, owner_id)

    def _set_status(self, tx_id: UUID, owner_id: str, status: Status) -> None:
        if status not in {"unpaid", "paid"}:
            raise ValidationFailedError("Invalid status")
        t = self._get_owned(tx_id, owner_id)
        before = t.status
        for row in self._group(t):
            self._apply_status(row, status)
        self._audit(owner_id, "set_status", "transaction", t.id, {"before": before, "after": status})
        self._commit()

    async def set_status(self, tx_id: UUID, owner_id: str, status: Status) -> None:
        await self._run(self._set_status, tx_id, owner_id, status)

    def _add_value(self, tx_id: UUID, owner_id: str, description: str, amount_cents: int) -> None:
        description = validate_addition(description, amount_cents)
        t = self._get_owned(tx_id, owner_id)
        group = self._group(t)
        for row in group:
            check_can_append(row.additions, description)

        addition_id = None
        for row in group:
            # explicit id: the audit row below refers to it before any flush
            addition = Addition(
                id=uuid.uuid4(),
                description=description,
                amount_cents=amount_cents,
                seq=max((a.seq for a in row.additions), default=-1) + 1,
                removed=False,
            )
            row.additions.append(addition)
            if row.status == "paid":
                self._apply_status(row, "paid")
            if row is t:
                addition_id = addition.id
        self._audit(
            owner_id,
            "add_value",
            "addition",
            addition_id,
            {
                "transaction_ids": [str(row.id) for row in group],
                "description": description,
                "amount_cents": amount_cents,
            },
        )
        self._commit()

    async def add_value(self, tx_id: UUID, owner_id: str, description: str, amount_cents: int) -> None:
        await self._run(self._add_value, tx_id, owner_id, description, amount_cents)

    def _remove_value(self, tx_id: UUID, owner_id: str, description: str) -> None:
        t = self._get_owned(tx_id, owner_id)
        group = self._group(t)
        removed = {row.id: find_removable(row.additions, description) for row in group}
        for row in group:
            removed[row.id].removed = True
            if row.status == "paid":
                self._apply_status(row, "paid")
        self._audit(
            owner_id,
            "remove_value",
            "addition",
            removed[t.id].id,
            {
                "transaction_ids": [str(row.id) for row in group],
                "description": description,
                "amount_cents": removed[t.id].amount_cents,
            },
        )
        self._commit()

    async def remove_value(self, tx_id: UUID, owner_id: str, description: str) -> None:
        await self._run(self._remove_value, tx_id, owner_id, description)
