from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledger.db import get_db
from ledger.deps import current_user_id
from ledger.errors import NotFoundError, ValidationFailedError
from ledger.models.share import Share
from ledger.schemas.shares import ShareIn, SharedUserOut


router = APIRouter(prefix="/api/v1/shares", tags=["shares"])


@router.get("/", response_model=list[SharedUserOut])
def list_shares(user_id: str = Depends(current_user_id), db: Session = Depends(get_db)):
    return db.query(Share).filter_by(owner_id=user_id).order_by(Share.sharee_id).all()


@router.post("/", response_model=SharedUserOut, status_code=201)
def share(payload: ShareIn, user_id: str = Depends(current_user_id), db: Session = Depends(get_db)):
    if payload.sharee_id == user_id:
        raise ValidationFailedError("Cannot share with yourself")
    s = db.query(Share).filter_by(owner_id=user_id, sharee_id=payload.sharee_id).one_or_none()
    if s is None:
        s = Share(owner_id=user_id, sharee_id=payload.sharee_id, aggregate=payload.aggregate)
        db.add(s)
    else:
        s.aggregate = payload.aggregate
    db.commit()
    db.refresh(s)
    return s


@router.delete("/{sharee_id}", status_code=204)
def unshare(sharee_id: str, user_id: str = Depends(current_user_id), db: Session = Depends(get_db)):
    s = db.query(Share).filter_by(owner_id=user_id, sharee_id=sharee_id).one_or_none()
    if s is None:
        raise NotFoundError("Share not found")
    db.delete(s)
    db.commit()
    return
