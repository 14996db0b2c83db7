from datetime import date

from fastapi import APIRouter, Depends, Header, Query

from ledger.deps import current_user_id, get_repository, get_session_flags
from ledger.repositories.sql import SqlLedgerRepository
from ledger.schemas.dashboard import AnalyticsOut, DashboardOut, OverdueOut
from ledger.services.analytics import month_analytics
from ledger.services.dashboard import MonthViewService
from ledger.services.overdue import OverdueNotice, SessionFlagStore, find_overdue


router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


def today() -> date:
    return date.today()


@router.get("/", response_model=DashboardOut)
async def month_dashboard(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=1, le=9999),
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
    flags: SessionFlagStore = Depends(get_session_flags),
    now: date = Depends(today),
    x_session_id: str | None = Header(default=None, alias="X-Session-Id"),
):
    view = await MonthViewService(repo).month_view(user_id, year, month, now)

    overdue = find_overdue(now, view.personal, owner_id=user_id)
    notice = OverdueNotice(flags.get(x_session_id or user_id))
    show_notice = bool(notice.collect(now, view.personal, owner_id=user_id))

    return DashboardOut(
        month=month,
        year=year,
        is_past=view.classification.is_past,
        is_future=view.classification.is_future,
        summary=view.summary,
        personal=view.personal,
        shared=view.shared,
        overdue=[OverdueOut(transaction=i.transaction, days_overdue=i.days_overdue) for i in overdue],
        show_overdue_notice=show_notice,
    )


@router.get("/analytics", response_model=AnalyticsOut)
async def month_charts(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=1, le=9999),
    user_id: str = Depends(current_user_id),
    repo: SqlLedgerRepository = Depends(get_repository),
):
    return await month_analytics(repo, user_id, year, month)
