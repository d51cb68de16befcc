# File: fixapp/models/status_update.py
from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from fixapp.db.base import Base
from fixapp.models.issue import IssueStatus, enum_values, utcnow

if TYPE_CHECKING:
    from fixapp.models.issue import Issue


class StatusUpdate(Base):
    __tablename__ = "status_updates"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    issue_id: Mapped[str] = mapped_column(ForeignKey("issues.id", ondelete="CASCADE"), index=True, nullable=False)
    status: Mapped[IssueStatus] = mapped_column(
        Enum(IssueStatus, values_callable=enum_values, name="issue_status"), nullable=False
    )
    message: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False, index=True)

    issue: Mapped["Issue"] = relationship(back_populates="status_updates")
