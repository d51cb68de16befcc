"""
Tests for the issue store: creation, listing, status history and deletion.
"""

import math
from datetime import datetime, timedelta

import pytest

from fixapp.core.errors import LocationError, NotFoundError, ValidationError
from fixapp.models.issue import Issue, IssueCategory, IssueStatus, utcnow
from fixapp.models.status_update import StatusUpdate
from fixapp.services.issue_store import (
    REPORTED_MESSAGE,
    TRACKING_ALPHABET,
    IssueStore,
    generate_tracking_id,
)
from fixapp.services.location import LocationFix, StaticLocationProvider


class TestCreateIssue:
    """Issue creation and its validation rules."""

    def test_create_issue_starts_logged_with_one_update(self, db, sample_issue_data):
        store = IssueStore(db)

        issue = store.create_issue(**sample_issue_data)

        assert issue.status == IssueStatus.logged
        assert issue.created_at == issue.updated_at
        assert len(issue.status_updates) == 1
        update = issue.status_updates[0]
        assert update.status == IssueStatus.logged
        assert update.message == REPORTED_MESSAGE

    def test_tracking_id_shape(self, db, sample_issue_data):
        issue = IssueStore(db).create_issue(**sample_issue_data)

        assert len(issue.tracking_id) == 8
        assert all(ch in TRACKING_ALPHABET for ch in issue.tracking_id)

    def test_category_accepts_display_string(self, db, sample_issue_data):
        sample_issue_data["category"] = "Water Leak"

        issue = IssueStore(db).create_issue(**sample_issue_data)

        assert issue.category == IssueCategory.water_leak

    def test_photo_is_stored(self, db, sample_issue_data):
        issue = IssueStore(db).create_issue(**sample_issue_data, photo=b"\xff\xd8jpeg",
                                            photo_content_type="image/jpeg")

        assert issue.photo == b"\xff\xd8jpeg"
        assert issue.photo_content_type == "image/jpeg"

    @pytest.mark.parametrize("category", ["Graffiti", "pothole", ""])
    def test_unknown_category_rejected(self, db, sample_issue_data, category):
        sample_issue_data["category"] = category

        with pytest.raises(ValidationError):
            IssueStore(db).create_issue(**sample_issue_data)

    @pytest.mark.parametrize("description", [None, "", "   "])
    def test_missing_description_rejected(self, db, sample_issue_data, description):
        sample_issue_data["description"] = description

        with pytest.raises(ValidationError):
            IssueStore(db).create_issue(**sample_issue_data)

    def test_missing_location_rejected(self, db, sample_issue_data):
        sample_issue_data["latitude"] = None

        with pytest.raises(ValidationError, match="location unavailable"):
            IssueStore(db).create_issue(**sample_issue_data)

    @pytest.mark.parametrize("lat,lon", [
        (91.0, 0.0),
        (-90.5, 0.0),
        (0.0, 180.1),
        (0.0, -181.0),
        (math.nan, 0.0),
        (0.0, math.inf),
    ])
    def test_out_of_range_coordinates_rejected(self, db, sample_issue_data, lat, lon):
        sample_issue_data.update(latitude=lat, longitude=lon)

        with pytest.raises(ValidationError):
            IssueStore(db).create_issue(**sample_issue_data)

    def test_boundary_coordinates_accepted(self, db, sample_issue_data):
        sample_issue_data.update(latitude=-90.0, longitude=180.0)

        issue = IssueStore(db).create_issue(**sample_issue_data)

        assert (issue.latitude, issue.longitude) == (-90.0, 180.0)

    def test_failed_validation_persists_nothing(self, db, sample_issue_data):
        sample_issue_data["description"] = ""

        with pytest.raises(ValidationError):
            IssueStore(db).create_issue(**sample_issue_data)

        assert db.query(Issue).count() == 0
        assert db.query(StatusUpdate).count() == 0


class TestTrackingIds:
    """Tracking id generation and collision handling."""

    def test_generate_tracking_id(self):
        ids = {generate_tracking_id() for _ in range(50)}

        assert all(len(i) == 8 for i in ids)
        assert len(ids) > 1

    def test_collision_triggers_regeneration(self, db, sample_issue_data):
        IssueStore(db, tracking_id_factory=lambda: "AAAA1111").create_issue(**sample_issue_data)
        candidates = iter(["AAAA1111", "AAAA1111", "BBBB2222"])

        issue = IssueStore(db, tracking_id_factory=lambda: next(candidates)).create_issue(**sample_issue_data)

        assert issue.tracking_id == "BBBB2222"

    def test_exhausted_attempts_raise(self, db, sample_issue_data):
        IssueStore(db, tracking_id_factory=lambda: "AAAA1111").create_issue(**sample_issue_data)
        store = IssueStore(db, tracking_id_factory=lambda: "AAAA1111", max_tracking_attempts=3)

        with pytest.raises(ValidationError):
            store.create_issue(**sample_issue_data)
        assert db.query(Issue).count() == 1


class TestReportIssue:
    """Creating an issue from a location provider."""

    def test_report_uses_provider_fix(self, db):
        provider = StaticLocationProvider(LocationFix(51.5, -0.12))

        issue = IssueStore(db).report_issue(IssueCategory.streetlight, "Light out", provider)

        assert (issue.latitude, issue.longitude) == (51.5, -0.12)

    def test_denied_location_raises(self, db):
        provider = StaticLocationProvider(denied="permission denied")

        with pytest.raises(LocationError, match="permission denied"):
            IssueStore(db).report_issue(IssueCategory.streetlight, "Light out", provider)
        assert db.query(Issue).count() == 0


class TestListIssues:
    """Filtering, searching and ordering."""

    def _make(self, store, category, description, created_at=None):
        issue = store.create_issue(category, description, 10.0, 20.0)
        if created_at:
            issue.created_at = created_at
            issue.updated_at = created_at
            store.db.commit()
        return issue

    def test_newest_first(self, db):
        store = IssueStore(db)
        base = datetime(2026, 1, 1)
        old = self._make(store, IssueCategory.pothole, "old", base)
        new = self._make(store, IssueCategory.pothole, "new", base + timedelta(days=2))
        mid = self._make(store, IssueCategory.pothole, "mid", base + timedelta(days=1))

        assert [i.id for i in store.list_issues()] == [new.id, mid.id, old.id]

    def test_category_filter(self, db):
        store = IssueStore(db)
        pothole = self._make(store, IssueCategory.pothole, "hole")
        self._make(store, IssueCategory.water_leak, "leak")

        assert [i.id for i in store.list_issues(category=IssueCategory.pothole)] == [pothole.id]
        assert pothole.id not in [i.id for i in store.list_issues(category="Water Leak")]

    def test_status_filter(self, db):
        store = IssueStore(db)
        a = self._make(store, IssueCategory.pothole, "a")
        self._make(store, IssueCategory.pothole, "b")
        store.append_status_update(a.id, IssueStatus.resolved, "Filled")

        resolved = store.list_issues(status=IssueStatus.resolved)

        assert [i.id for i in resolved] == [a.id]
        assert len(store.list_issues(status="Logged")) == 1

    def test_search_is_case_insensitive_on_category(self, db):
        store = IssueStore(db)
        pothole = self._make(store, IssueCategory.pothole, "Something on Main Road")
        self._make(store, IssueCategory.power_outage, "Whole street dark")

        assert [i.id for i in store.list_issues(search="pothole")] == [pothole.id]

    def test_search_matches_description_and_tracking_id(self, db):
        store = IssueStore(db)
        leak = self._make(store, IssueCategory.water_leak, "Burst PIPE near school")
        other = self._make(store, IssueCategory.pothole, "Crater")

        assert [i.id for i in store.list_issues(search="pipe")] == [leak.id]
        assert [i.id for i in store.list_issues(search=other.tracking_id.lower())] == [other.id]

    def test_search_treats_wildcards_literally(self, db):
        store = IssueStore(db)
        self._make(store, IssueCategory.pothole, "no special chars")

        assert store.list_issues(search="%") == []

    def test_blank_search_ignored(self, db):
        store = IssueStore(db)
        self._make(store, IssueCategory.pothole, "a")

        assert len(store.list_issues(search="  ")) == 1

    def test_filters_combine(self, db):
        store = IssueStore(db)
        self._make(store, IssueCategory.pothole, "Main road")
        target = self._make(store, IssueCategory.water_leak, "Main road")

        result = store.list_issues(category=IssueCategory.water_leak, search="main")

        assert [i.id for i in result] == [target.id]


class TestStatusUpdates:
    """Appending to the status history."""

    def test_append_updates_issue(self, db, sample_issue_data):
        store = IssueStore(db)
        issue = store.create_issue(**sample_issue_data)

        update = store.append_status_update(issue.id, IssueStatus.in_progress, "Crew dispatched")

        db.refresh(issue)
        assert issue.status == IssueStatus.in_progress
        assert issue.updated_at >= issue.created_at
        assert update.message == "Crew dispatched"
        history = store.status_history(issue.id)
        assert [u.status for u in history] == [IssueStatus.logged, IssueStatus.in_progress]

    def test_updated_at_never_precedes_created_at(self, db, sample_issue_data):
        store = IssueStore(db)
        issue = store.create_issue(**sample_issue_data)
        issue.created_at = utcnow() + timedelta(hours=1)
        db.commit()

        store.append_status_update(issue.id, IssueStatus.resolved)

        db.refresh(issue)
        assert issue.updated_at >= issue.created_at

    def test_append_unknown_issue(self, db):
        with pytest.raises(NotFoundError):
            IssueStore(db).append_status_update("missing", IssueStatus.resolved)

    def test_append_invalid_status(self, db, sample_issue_data):
        store = IssueStore(db)
        issue = store.create_issue(**sample_issue_data)

        with pytest.raises(ValidationError):
            store.append_status_update(issue.id, "Closed")


class TestLookupAndDelete:
    """Reads by id / tracking id and cascading deletes."""

    def test_get_by_tracking_id_case_insensitive(self, db, sample_issue_data):
        store = IssueStore(db)
        issue = store.create_issue(**sample_issue_data)

        assert store.get_by_tracking_id(issue.tracking_id.lower()).id == issue.id

    def test_get_missing(self, db):
        store = IssueStore(db)

        with pytest.raises(NotFoundError):
            store.get_issue("nope")
        with pytest.raises(NotFoundError):
            store.get_by_tracking_id("ZZZZ9999")

    def test_delete_cascades(self, db, sample_issue_data):
        store = IssueStore(db)
        issue = store.create_issue(**sample_issue_data)
        store.append_status_update(issue.id, IssueStatus.in_progress)
        issue_id = issue.id

        store.delete_issue(issue_id)

        assert issue_id not in [i.id for i in store.list_issues()]
        assert db.query(StatusUpdate).filter(StatusUpdate.issue_id == issue_id).count() == 0

    def test_delete_missing(self, db):
        with pytest.raises(NotFoundError):
            IssueStore(db).delete_issue("nope")
