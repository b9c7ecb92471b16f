"""Overlap queries behind booking conflict detection."""

from datetime import timedelta

import pytest

from skilloop.core.enums import BLOCKING_BOOKING_STATUSES
from skilloop.repositories.booking_repository import BookingRepository


@pytest.fixture
def repo(db):
    return BookingRepository(db)


class TestFindOverlapping:
    def test_partial_overlap_is_found(self, repo, make_booking, test_trainer):
        existing = make_booking(status="confirmed")

        found = repo.find_overlapping(
            existing.start_time + timedelta(minutes=30),
            existing.end_time + timedelta(minutes=30),
            BLOCKING_BOOKING_STATUSES,
            trainer_id=test_trainer.id,
        )

        assert [b.id for b in found] == [existing.id]

    def test_touching_ranges_do_not_overlap(self, repo, make_booking, test_trainer):
        existing = make_booking(status="confirmed")

        before = repo.find_overlapping(
            existing.start_time - timedelta(hours=1),
            existing.start_time,
            BLOCKING_BOOKING_STATUSES,
            trainer_id=test_trainer.id,
        )
        after = repo.find_overlapping(
            existing.end_time,
            existing.end_time + timedelta(hours=1),
            BLOCKING_BOOKING_STATUSES,
            trainer_id=test_trainer.id,
        )

        assert before == []
        assert after == []

    def test_non_blocking_statuses_are_ignored(self, repo, make_booking, test_trainer):
        existing = make_booking(status="cancelled")

        found = repo.find_overlapping(
            existing.start_time, existing.end_time, BLOCKING_BOOKING_STATUSES, trainer_id=test_trainer.id
        )

        assert found == []

    def test_client_scope_and_exclusion(self, repo, make_booking, test_client_profile):
        existing = make_booking(status="pending")

        by_client = repo.find_overlapping(
            existing.start_time, existing.end_time, BLOCKING_BOOKING_STATUSES, student_id=test_client_profile.id
        )
        excluded = repo.find_overlapping(
            existing.start_time,
            existing.end_time,
            BLOCKING_BOOKING_STATUSES,
            student_id=test_client_profile.id,
            exclude_booking_id=existing.id,
        )

        assert [b.id for b in by_client] == [existing.id]
        assert excluded == []

    def test_scope_is_required(self, repo, future_window):
        start, end = future_window()
        with pytest.raises(ValueError):
            repo.find_overlapping(start, end, BLOCKING_BOOKING_STATUSES)
