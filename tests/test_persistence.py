"""
Tests for durable booking persistence.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from barberbot.application.exceptions import BookingStoreError
from barberbot.application.ports.booking_store import BookingFilter
from barberbot.domain.entities.booking import BookingDraft, BookingStatus
from barberbot.infrastructure.store.json_store import JsonBookingStore

TZ = ZoneInfo("America/Sao_Paulo")


def test_json_store_persistence():
    """Bookings survive reopening the store."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "bookings.json")
        store = JsonBookingStore(path=path, timezone=TZ)
        booking = store.insert(
            BookingDraft(
                customer_handle="5521988887777",
                customer_name="João",
                scheduled_at=datetime(2026, 10, 20, 14, 0, tzinfo=TZ),
            )
        )

        reopened = JsonBookingStore(path=path, timezone=TZ)
        retrieved = reopened.find_one(BookingFilter(customer_handle="5521988887777"))

        assert retrieved == booking
        assert retrieved.status == BookingStatus.PENDING
        assert retrieved.scheduled_at.tzinfo is not None


def test_status_update_and_delete_persist():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "nested" / "bookings.json")
        store = JsonBookingStore(path=path, timezone=TZ)
        first = store.insert(BookingDraft(customer_handle="a", scheduled_at=datetime(2026, 10, 20, 10, 0, tzinfo=TZ)))
        second = store.insert(BookingDraft(customer_handle="b", scheduled_at=datetime(2026, 10, 20, 12, 0, tzinfo=TZ)))

        store.update(first.id, status=BookingStatus.CONFIRMED)
        store.delete(second.id)

        reopened = JsonBookingStore(path=path, timezone=TZ)
        remaining = reopened.find(BookingFilter())
        assert [(b.id, b.status) for b in remaining] == [(first.id, BookingStatus.CONFIRMED)]


def test_created_at_is_not_changed_by_updates():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(path=str(Path(tmpdir) / "bookings.json"), timezone=TZ)
        booking = store.insert(BookingDraft(customer_handle="a", scheduled_at=datetime(2026, 10, 20, 10, 0, tzinfo=TZ)))

        store.update(booking.id, status="confirmed")

        updated = store.find_one(BookingFilter())
        assert updated.created_at == booking.created_at
        assert updated.status == BookingStatus.CONFIRMED


def test_unknown_fields_cannot_be_patched():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(path=str(Path(tmpdir) / "bookings.json"), timezone=TZ)
        booking = store.insert(BookingDraft(customer_handle="a", scheduled_at=datetime(2026, 10, 20, 10, 0, tzinfo=TZ)))

        with pytest.raises(ValueError):
            store.update(booking.id, created_at=datetime(2020, 1, 1, tzinfo=TZ))


def test_corrupted_file_fails_fast():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bookings.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(BookingStoreError):
            JsonBookingStore(path=str(path), timezone=TZ)


def test_sorting_and_descending_lookup():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(path=str(Path(tmpdir) / "bookings.json"), timezone=TZ)
        for hour in (15, 9, 12):
            store.insert(BookingDraft(customer_handle="a", scheduled_at=datetime(2026, 10, 20, hour, 0, tzinfo=TZ)))

        assert [b.scheduled_at.hour for b in store.find(BookingFilter())] == [9, 12, 15]
        assert store.find_one(BookingFilter(), descending=True).scheduled_at.hour == 15
