import uuid
import datetime as dt
from sqlalchemy import String, Boolean, DateTime, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class Share(Base):
    __tablename__ = "shares"
    __table_args__ = (UniqueConstraint("owner_id", "sharee_id", name="uq_shares_owner_sharee"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    sharee_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    aggregate: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
