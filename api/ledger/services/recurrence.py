"""Expand one entered transaction into a monthly series and submit it."""

import asyncio
import logging

from ledger.errors import LedgerError, ValidationFailedError
from ledger.repositories.base import LedgerRepository
from ledger.schemas.transactions import ControlledTxIn, TransactionDraft, TxOut
from ledger.services.months import add_months

logger = logging.getLogger(__name__)


def expand(draft: TransactionDraft, repeat_count: int, max_repeat_count: int | None = None) -> list[TransactionDraft]:
    """Return ``repeat_count + 1`` drafts, one per consecutive month.

    Draft ``i`` is the base date shifted by ``i`` calendar months; offsets are
    taken from the base date so a 31st stays on the 31st where it exists.
    """
    if repeat_count < 0:
        raise ValidationFailedError("repeat_count must not be negative")
    if max_repeat_count is not None and repeat_count > max_repeat_count:
        raise ValidationFailedError(f"repeat_count must be at most {max_repeat_count}")
    return [
        draft.model_copy(update={"date": add_months(draft.date, i)})
        for i in range(repeat_count + 1)
    ]


async def _submit_one(repository: LedgerRepository, owner_id: str, draft: TransactionDraft) -> TxOut:
    payload = draft.to_payload(owner_id)
    if isinstance(payload, ControlledTxIn):
        return await repository.create_controlled(payload)
    return await repository.create_simple(payload)


async def submit_series(
    repository: LedgerRepository,
    owner_id: str,
    drafts: list[TransactionDraft],
    compensate: bool = True,
) -> list[TxOut]:
    """Create every draft concurrently and wait for all of them.

    Fails as a whole with the first error if any submission fails. With
    ``compensate`` the records that did get created are deleted again before
    the error is raised; a failed rollback is logged and does not mask it.
    """
    results = await asyncio.gather(
        *(_submit_one(repository, owner_id, d) for d in drafts),
        return_exceptions=True,
    )
    errors = [r for r in results if isinstance(r, BaseException)]
    if not errors:
        return list(results)

    created = [r for r in results if isinstance(r, TxOut)]
    logger.warning(
        "Recurring series for %s failed: %d of %d submissions rejected",
        owner_id,
        len(errors),
        len(drafts),
    )
    if compensate and created:
        for tx in created:
            try:
                await repository.delete(tx.id, owner_id)
            except LedgerError as e:
                logger.error("Could not roll back %s: %s", tx.id, e.message)
    raise errors[0]
