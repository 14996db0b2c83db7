"""Partial value adjustments ("additions") layered onto a transaction.

Additions are never deleted: removing one flags it ``removed`` so the history
stays readable. Among the non-removed additions of a transaction a
description identifies one entry.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol
from uuid import UUID

from ledger.errors import NotFoundError, ValidationFailedError
from ledger.repositories.base import LedgerRepository


class AdditionLike(Protocol):
    description: str
    amount_cents: int
    removed: bool


def active_additions(additions: Iterable[AdditionLike]) -> list:
    return [a for a in additions if not a.removed]


def effective_amount(amount_cents: int, additions: Iterable[AdditionLike]) -> int:
    """Base amount plus every non-removed addition."""
    return amount_cents + sum(a.amount_cents for a in active_additions(additions))


def validate_addition(description: str, amount_cents: int) -> str:
    description = (description or "").strip()
    if not description:
        raise ValidationFailedError("description is required")
    if amount_cents <= 0:
        raise ValidationFailedError("amount must be positive")
    return description


def check_can_append(additions: Iterable[AdditionLike], description: str) -> None:
    if any(a.description == description for a in active_additions(additions)):
        raise ValidationFailedError(f"An active addition named '{description}' already exists")


def find_removable(additions: Sequence[AdditionLike], description: str):
    """Return the most recent non-removed addition with ``description``.

    ``additions`` must be in insertion order.
    """
    for a in reversed(additions):
        if not a.removed and a.description == description:
            return a
    raise NotFoundError(f"No active addition named '{description}'")


class AdditionLedger:
    """Validates local input, then delegates the mutation to the repository."""

    def __init__(self, repository: LedgerRepository):
        self.repository = repository

    async def add_value(self, tx_id: UUID, owner_id: str, description: str, amount_cents: int) -> None:
        description = validate_addition(description, amount_cents)
        await self.repository.add_value(tx_id, owner_id, description, amount_cents)

    async def remove_value(self, tx_id: UUID, owner_id: str, description: str) -> None:
        description = (description or "").strip()
        if not description:
            raise ValidationFailedError("description is required")
        await self.repository.remove_value(tx_id, owner_id, description)
