# File: fixapp/models/issue.py
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import TYPE_CHECKING
from sqlalchemy import String, Float, Enum, DateTime, LargeBinary, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from fixapp.db.base import Base

if TYPE_CHECKING:
    from fixapp.models.status_update import StatusUpdate


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_values(enum_cls):
    return [m.value for m in enum_cls]


class IssueCategory(PyEnum):
    pothole = "Pothole"
    water_leak = "Water Leak"
    streetlight = "Streetlight"
    illegal_dumping = "Illegal Dumping"
    power_outage = "Power Outage"


class IssueStatus(PyEnum):
    logged = "Logged"
    in_progress = "In Progress"
    resolved = "Resolved"


class Issue(Base):
    __tablename__ = "issues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tracking_id: Mapped[str] = mapped_column(String(8), unique=True, index=True)
    category: Mapped[IssueCategory] = mapped_column(
        Enum(IssueCategory, values_callable=enum_values, name="issue_category"), index=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[IssueStatus] = mapped_column(
        Enum(IssueStatus, values_callable=enum_values, name="issue_status"),
        default=IssueStatus.logged,
        index=True,
    )

    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    photo: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True, deferred=True)
    photo_content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    status_updates: Mapped[list["StatusUpdate"]] = relationship(
        back_populates="issue",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="StatusUpdate.id",
    )

Index("ix_issues_lat_lng", Issue.latitude, Issue.longitude)
