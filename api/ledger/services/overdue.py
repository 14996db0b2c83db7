"""Overdue detection for unpaid transactions, and the once-per-session notice."""

import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from cachetools import TTLCache

from ledger.schemas.transactions import TxOut


@dataclass(frozen=True)
class OverdueItem:
    transaction: TxOut
    days_overdue: int


def parse_due_date(value: date | str) -> date:
    """Read a ``YYYY-MM-DD`` value field by field, with no timezone involved."""
    if isinstance(value, date):
        return value
    year, month, day = (int(part) for part in value[:10].split("-"))
    return date(year, month, day)


def days_overdue(today: date, due: date | str) -> int:
    return max(0, (today - parse_due_date(due)).days)


def find_overdue(today: date, transactions: Iterable[TxOut], owner_id: str | None = None) -> list[OverdueItem]:
    """Unpaid transactions due strictly before ``today``, optionally only ``owner_id``'s."""
    items = []
    for tx in transactions:
        if tx.status != "unpaid":
            continue
        if owner_id is not None and tx.owner_id != owner_id:
            continue
        days = days_overdue(today, tx.date)
        if days > 0:
            items.append(OverdueItem(transaction=tx, days_overdue=days))
    return items


class SessionFlag(Protocol):
    def is_set(self) -> bool: ...

    def set(self) -> None: ...


class InMemorySessionFlag:
    def __init__(self) -> None:
        self._value = False

    def is_set(self) -> bool:
        return self._value

    def set(self) -> None:
        self._value = True


class SessionFlagStore:
    """One flag per session key.

    Keys expire ``ttl`` seconds after they were first seen, and once
    ``maxsize`` keys are held the least recently used one is dropped. A
    dropped session simply gets the notice again.
    """

    def __init__(self, maxsize: int = 10_000, ttl: float = 12 * 60 * 60, timer=time.monotonic) -> None:
        self._flags: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)

    def get(self, session_key: str) -> InMemorySessionFlag:
        flag = self._flags.get(session_key)
        if flag is None:
            flag = self._flags[session_key] = InMemorySessionFlag()
        return flag

    def __len__(self) -> int:
        return len(self._flags)


class OverdueNotice:
    def __init__(self, flag: SessionFlag):
        self.flag = flag

    def collect(self, today: date, transactions: Iterable[TxOut], owner_id: str | None = None) -> list[OverdueItem]:
        """Return the overdue items the first time any exist in this session, else ``[]``."""
        if self.flag.is_set():
            return []
        items = find_overdue(today, transactions, owner_id)
        if items:
            self.flag.set()
        return items
