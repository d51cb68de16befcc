# File: fixapp/services/issue_store.py
"""Issue store: issue records plus their append-only status history."""
import logging
import math
import secrets
import string
import threading
from typing import List, Optional, Union

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fixapp.core.config import settings
from fixapp.core.errors import NotFoundError, ValidationError
from fixapp.models.issue import Issue, IssueCategory, IssueStatus, utcnow
from fixapp.models.status_update import StatusUpdate
from fixapp.services.location import LocationProvider, request_fix

logger = logging.getLogger(__name__)

TRACKING_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_LENGTH = 8
REPORTED_MESSAGE = "Issue reported successfully"


def generate_tracking_id() -> str:
    return "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_LENGTH))


def coerce_enum(enum_cls, value, field: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field} {value!r}; expected one of: {allowed}")


def _check_coordinate(value, low: float, high: float, name: str) -> float:
    if value is None:
        raise ValidationError("location unavailable")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if not math.isfinite(value) or not (low <= value <= high):
        raise ValidationError(f"{name} must be between {low:g} and {high:g}")
    return value


def _like_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class IssueStore:
    # one writer at a time across every store handle
    _write_lock = threading.Lock()

    def __init__(self, db: Session, tracking_id_factory=generate_tracking_id,
                 max_tracking_attempts: Optional[int] = None):
        self.db = db
        self._new_tracking_id = tracking_id_factory
        self.max_tracking_attempts = max_tracking_attempts or settings.tracking_id_max_attempts

    def _unused_tracking_id(self) -> str:
        for _ in range(self.max_tracking_attempts):
            candidate = self._new_tracking_id()
            taken = self.db.query(Issue.id).filter(Issue.tracking_id == candidate).first()
            if not taken:
                return candidate
            logger.info("Tracking id collision on %s, regenerating", candidate)
        raise ValidationError("Could not allocate a unique tracking id")

    def create_issue(
        self,
        category: Union[IssueCategory, str],
        description: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        photo: Optional[bytes] = None,
        photo_content_type: Optional[str] = None,
    ) -> Issue:
        category = coerce_enum(IssueCategory, category, "category")
        if not description or not description.strip():
            raise ValidationError("Description is required")
        lat = _check_coordinate(latitude, -90.0, 90.0, "latitude")
        lon = _check_coordinate(longitude, -180.0, 180.0, "longitude")

        with self._write_lock:
            now = utcnow()
            obj = Issue(
                tracking_id=self._unused_tracking_id(),
                category=category,
                description=description.strip(),
                latitude=lat,
                longitude=lon,
                photo=photo or None,
                photo_content_type=photo_content_type if photo else None,
                status=IssueStatus.logged,
                created_at=now,
                updated_at=now,
            )
            obj.status_updates.append(
                StatusUpdate(status=IssueStatus.logged, message=REPORTED_MESSAGE, created_at=now)
            )
            self.db.add(obj)
            try:
                self.db.commit()
            except IntegrityError:
                # lost a race for the tracking id between the check and the insert
                self.db.rollback()
                raise ValidationError("Tracking id conflict, please retry")
            except Exception:
                logger.error("Commit failed, rolling back", exc_info=True)
                self.db.rollback()
                raise
            self.db.refresh(obj)

        logger.info("Issue %s created (%s, tracking %s)", obj.id, category.value, obj.tracking_id)
        return obj

    def report_issue(self, category, description, location_provider: LocationProvider,
                     photo: Optional[bytes] = None, photo_content_type: Optional[str] = None) -> Issue:
        """Create an issue at the provider's current fix. Raises LocationError on denial."""
        fix = request_fix(location_provider)
        return self.create_issue(category, description, fix.latitude, fix.longitude,
                                 photo=photo, photo_content_type=photo_content_type)

    def list_issues(
        self,
        category: Optional[Union[IssueCategory, str]] = None,
        status: Optional[Union[IssueStatus, str]] = None,
        search: Optional[str] = None,
    ) -> List[Issue]:
        q = self.db.query(Issue)
        if category:
            q = q.filter(Issue.category == coerce_enum(IssueCategory, category, "category"))
        if status:
            q = q.filter(Issue.status == coerce_enum(IssueStatus, status, "status"))

        if search and search.strip():
            needle = search.strip()
            term = f"%{_like_escape(needle)}%"
            conds = [
                Issue.description.ilike(term, escape="\\"),
                Issue.tracking_id.ilike(term, escape="\\"),
            ]
            # category is an enum column, so match its display names here
            cats = [c for c in IssueCategory if needle.lower() in c.value.lower()]
            if cats:
                conds.append(Issue.category.in_(cats))
            q = q.filter(or_(*conds))

        return q.order_by(Issue.created_at.desc()).all()

    def get_issue(self, issue_id: str) -> Issue:
        obj = self.db.get(Issue, issue_id)
        if not obj:
            raise NotFoundError("Issue", issue_id)
        return obj

    def get_by_tracking_id(self, tracking_id: str) -> Issue:
        obj = (
            self.db.query(Issue)
            .filter(Issue.tracking_id == (tracking_id or "").strip().upper())
            .first()
        )
        if not obj:
            raise NotFoundError("Issue with tracking id", tracking_id)
        return obj

    def status_history(self, issue_id: str) -> List[StatusUpdate]:
        return list(self.get_issue(issue_id).status_updates)

    def append_status_update(
        self,
        issue_id: str,
        status: Union[IssueStatus, str],
        message: Optional[str] = None,
    ) -> StatusUpdate:
        status = coerce_enum(IssueStatus, status, "status")
        with self._write_lock:
            obj = self.get_issue(issue_id)
            now = max(utcnow(), obj.created_at)
            update = StatusUpdate(status=status, message=(message or "").strip() or None, created_at=now)
            obj.status = status
            obj.updated_at = now
            obj.status_updates.append(update)
            try:
                self.db.commit()
            except Exception:
                logger.error("Commit failed, rolling back", exc_info=True)
                self.db.rollback()
                raise
            self.db.refresh(update)

        logger.info("Issue %s moved to %s", issue_id, status.value)
        return update

    def delete_issue(self, issue_id: str) -> None:
        with self._write_lock:
            obj = self.get_issue(issue_id)
            self.db.delete(obj)
            try:
                self.db.commit()
            except Exception:
                logger.error("Commit failed, rolling back", exc_info=True)
                self.db.rollback()
                raise
        logger.info("Issue %s deleted", issue_id)
