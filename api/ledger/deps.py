from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from ledger.db import get_db
from ledger.errors import NotAuthenticatedError
from ledger.repositories.sql import SqlLedgerRepository
from ledger.services.overdue import SessionFlagStore


def current_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    if not x_user_id or not x_user_id.strip():
        raise NotAuthenticatedError()
    return x_user_id.strip()


def get_repository(db: Session = Depends(get_db)) -> SqlLedgerRepository:
    return SqlLedgerRepository(db)


def get_session_flags(request: Request) -> SessionFlagStore:
    return request.app.state.session_flags
