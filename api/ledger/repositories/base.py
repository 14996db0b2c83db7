"""The Ledger Repository contract consumed by the engine.

Implementations may be network or disk backed. Every call can fail with a
``LedgerError``; nothing is retried and calls are not idempotent.
"""

from typing import Protocol
from uuid import UUID

from ledger.schemas.transactions import ControlledTxIn, MonthOut, SimpleTxIn, Status, TxOut, TxUpdate


class LedgerRepository(Protocol):
    async def get_month(self, owner_id: str, month: int, year: int, include_shared: bool = True) -> MonthOut: ...

    async def create_simple(self, payload: SimpleTxIn) -> TxOut: ...

    async def create_controlled(self, payload: ControlledTxIn) -> TxOut: ...

    async def update(self, tx_id: UUID, owner_id: str, payload: TxUpdate) -> TxOut: ...

    async def delete(self, tx_id: UUID, owner_id: str) -> None: ...

    async def set_status(self, tx_id: UUID, owner_id: str, status: Status) -> None: ...

    async def add_value(self, tx_id: UUID, owner_id: str, description: str, amount_cents: int) -> None: ...

    async def remove_value(self, tx_id: UUID, owner_id: str, description: str) -> None: ...
