import pytest
from conftest import at

from jobtracker.domain.scheduling.conflicts import ConflictChecker, intervals_overlap
from jobtracker.shared.errors import ValidationError


class TestIntervalsOverlap:
    """Half-open interval test used for double-booking"""

    def test_back_to_back_does_not_overlap(self):
        assert not intervals_overlap(at(11), at(12), at(10), at(11))
        assert not intervals_overlap(at(9), at(10), at(10), at(11))

    def test_one_minute_overlap(self):
        assert intervals_overlap(at(10, 59), at(11, 30), at(10), at(11))

    def test_contained_and_containing(self):
        assert intervals_overlap(at(10, 15), at(10, 45), at(10), at(11))
        assert intervals_overlap(at(9), at(12), at(10), at(11))

    def test_identical_windows_overlap(self):
        assert intervals_overlap(at(10), at(11), at(10), at(11))

    def test_disjoint_windows(self):
        assert not intervals_overlap(at(13), at(14), at(10), at(11))
        assert not intervals_overlap(at(10), at(11), at(10, day=2), at(11, day=2))


class TestConflictChecker:
    """Checker over persisted appointments"""

    @pytest.fixture
    def booked(self, workshop):
        """Taylor booked 10:00-11:00"""
        taylor = workshop.technician("Taylor")
        workshop.scheduled_job(technician=taylor, start=at(10), end=at(11))
        return taylor

    def test_overlapping_window_conflicts(self, db, booked):
        checker = ConflictChecker(db)
        assert checker.has_conflict(booked.id, at(10, 30), at(11, 30))
        assert checker.has_conflict(booked.id, at(10, 59), at(11, 30))

    def test_find_conflict_returns_blocking_appointment(self, db, booked):
        conflict = ConflictChecker(db).find_conflict(booked.id, at(9, 30), at(10, 30))
        assert conflict is not None
        assert conflict.technician_id == booked.id
        assert conflict.start_time == at(10)
        assert conflict.end_time == at(11)

    def test_adjacent_windows_are_free(self, db, booked):
        checker = ConflictChecker(db)
        assert not checker.has_conflict(booked.id, at(11), at(12))
        assert not checker.has_conflict(booked.id, at(9), at(10))

    def test_other_technician_is_never_blocked(self, db, workshop, booked):
        alex = workshop.technician("Alex")
        assert not ConflictChecker(db).has_conflict(alex.id, at(10), at(11))

    def test_rejects_empty_or_inverted_window(self, db, booked):
        checker = ConflictChecker(db)
        with pytest.raises(ValidationError):
            checker.has_conflict(booked.id, at(10), at(10))
        with pytest.raises(ValidationError):
            checker.has_conflict(booked.id, at(11), at(10))
