from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from barberbot.application.ports.booking_store import BookingFilter, BookingStorePort
from barberbot.domain.entities.booking import Booking, BookingDraft, BookingStatus

UPDATABLE_FIELDS = frozenset({"customer_name", "scheduled_at", "status", "reminder_sent"})


def new_booking(draft: BookingDraft, created_at: datetime) -> Booking:
    return Booking(
        id=uuid.uuid4().hex,
        customer_handle=draft.customer_handle,
        customer_name=draft.customer_name,
        scheduled_at=draft.scheduled_at,
        status=draft.status,
        reminder_sent=draft.reminder_sent,
        created_at=created_at,
    )


def apply_patch(booking: Booking, patch: dict[str, Any]) -> Booking:
    unknown = set(patch) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update booking fields: {sorted(unknown)}")
    if "status" in patch:
        patch = {**patch, "status": BookingStatus(patch["status"])}
    return replace(booking, **patch)


class MemoryBookingStore(BookingStorePort):
    def __init__(self, timezone: ZoneInfo | None = None) -> None:
        self._bookings: dict[str, Booking] = {}
        self._timezone = timezone
        self._lock = threading.Lock()

    def find(self, booking_filter: BookingFilter, descending: bool = False) -> list[Booking]:
        with self._lock:
            matches = [b for b in self._bookings.values() if booking_filter.matches(b)]
        return sorted(matches, key=lambda b: b.scheduled_at, reverse=descending)

    def find_one(self, booking_filter: BookingFilter, descending: bool = False) -> Booking | None:
        matches = self.find(booking_filter, descending=descending)
        return matches[0] if matches else None

    def insert(self, draft: BookingDraft) -> Booking:
        booking = new_booking(draft, datetime.now(self._timezone))
        with self._lock:
            self._bookings[booking.id] = booking
        return booking

    def update(self, booking_id: str, **patch: Any) -> None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return
            self._bookings[booking_id] = apply_patch(booking, patch)

    def delete(self, booking_id: str) -> None:
        with self._lock:
            self._bookings.pop(booking_id, None)
