import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ledger.config import Settings, get_settings
from ledger.deps import current_user_id, get_repository
from ledger.repositories.sql import SqlLedgerRepository
from ledger.schemas.transactions import (
    AddValueRequest,
    ControlledTxIn,
    MonthOut,
    RecurringTxIn,
    SimpleTxIn,
    StatusRequest,
    SubtractValueRequest,
    TransactionDraft,
    TxOut,
    TxUpdate,
)
from ledger.services.additions import AdditionLedger
from ledger.services.recurrence import expand, submit_series


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


@router.get("/", response_model=MonthOut)
async def get_month(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=1, le=9999),
    include_shared: bool = True,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    return await repo.get_month(user_id, month, year, include_shared)


@router.post("/simple", response_model=TxOut, status_code=201)
async def create_simple(
    payload: SimpleTxIn,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    return await repo.create_simple(payload.model_copy(update={"owner_id": user_id}))


@router.post("/controlled", response_model=TxOut, status_code=201)
async def create_controlled(
    payload: ControlledTxIn,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    return await repo.create_controlled(payload.model_copy(update={"owner_id": user_id}))


@router.post("/recurring", response_model=list[TxOut], status_code=201)
async def create_recurring(
    payload: RecurringTxIn,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    base = TransactionDraft.model_validate(payload.model_dump(exclude={"repeat_count"}))
    drafts = expand(base, payload.repeat_count, settings.max_repeat_count)
    created = await submit_series(repo, user_id, drafts, compensate=settings.compensate_failed_series)
    logger.info("Created %d-month series '%s' for %s", len(created), base.name, user_id)
    return created


@router.put("/{tx_id}", response_model=TxOut)
async def update_transaction(
    tx_id: UUID,
    payload: TxUpdate,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    return await repo.update(tx_id, user_id, payload)


@router.delete("/{tx_id}", status_code=204)
async def delete_transaction(
    tx_id: UUID,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    await repo.delete(tx_id, user_id)
    return


@router.patch("/{tx_id}/status", status_code=204)
async def set_status(
    tx_id: UUID,
    payload: StatusRequest,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    await repo.set_status(tx_id, user_id, payload.status)
    return


@router.patch("/{tx_id}/add-value", status_code=204)
async def add_value(
    tx_id: UUID,
    payload: AddValueRequest,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    await AdditionLedger(repo).add_value(tx_id, user_id, payload.description, payload.amount_cents)
    return


@router.patch("/{tx_id}/subtract-value", status_code=204)
async def remove_value(
    tx_id: UUID,
    payload: SubtractValueRequest,
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    await AdditionLedger(repo).remove_value(tx_id, user_id, payload.description)
    return
