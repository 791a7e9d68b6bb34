from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from barberbot.application.exceptions import BookingStoreError
from barberbot.application.ports.booking_store import BookingFilter, BookingStorePort
from barberbot.domain.entities.booking import Booking, BookingDraft, BookingStatus
from barberbot.infrastructure.store.memory_store import apply_patch, new_booking


class JsonBookingStore(BookingStorePort):
    """Bookings kept in a single JSON file, rewritten atomically on every change."""

    def __init__(self, path: str = "./data/bookings.json", timezone: ZoneInfo | None = None) -> None:
        self._path = Path(path)
        self._timezone = timezone
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BookingStoreError(f"Cannot create booking store directory {self._path.parent}: {e}") from e
        # Fail at startup rather than on the first customer message.
        self._bookings = self._load()

    def _load(self) -> dict[str, Booking]:
        """Load bookings from the JSON file, empty if the file does not exist yet."""
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise BookingStoreError(f"Cannot read booking store {self._path}: {e}") from e

        bookings = {}
        for item in data.get("bookings", []):
            booking = self._deserialize_booking(item)
            bookings[booking.id] = booking
        self._logger.info("Booking store loaded", extra={"reason": f"{len(bookings)} bookings from {self._path}"})
        return bookings

    def _save(self) -> None:
        """Save bookings to the JSON file atomically."""
        temp_path = self._path.with_suffix(".json.tmp")
        data = {
            "version": 1,
            "bookings": [self._serialize_booking(b) for b in self._bookings.values()],
        }
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise BookingStoreError(f"Cannot write booking store {self._path}: {e}") from e

    def _serialize_booking(self, booking: Booking) -> dict[str, Any]:
        return {
            "id": booking.id,
            "customer_name": booking.customer_name,
            "customer_handle": booking.customer_handle,
            "scheduled_at": booking.scheduled_at.isoformat(),
            "status": booking.status.value,
            "reminder_sent": booking.reminder_sent,
            "created_at": booking.created_at.isoformat(),
        }

    def _deserialize_booking(self, data: dict[str, Any]) -> Booking:
        try:
            return Booking(
                id=data["id"],
                customer_name=data.get("customer_name", ""),
                customer_handle=data["customer_handle"],
                scheduled_at=self._to_local(datetime.fromisoformat(data["scheduled_at"])),
                status=BookingStatus(data["status"]),
                reminder_sent=bool(data.get("reminder_sent", False)),
                created_at=self._to_local(datetime.fromisoformat(data["created_at"])),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise BookingStoreError(f"Malformed booking record in {self._path}: {e}") from e

    def _to_local(self, moment: datetime) -> datetime:
        if self._timezone is None or moment.tzinfo is None:
            return moment
        return moment.astimezone(self._timezone)

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
            try:
                self._save()
            except BookingStoreError:
                del self._bookings[booking.id]
                raise
        return booking

    def update(self, booking_id: str, **patch: Any) -> None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return
            self._bookings[booking_id] = apply_patch(booking, patch)
            try:
                self._save()
            except BookingStoreError:
                self._bookings[booking_id] = booking
                raise

    def delete(self, booking_id: str) -> None:
        with self._lock:
            booking = self._bookings.pop(booking_id, None)
            if booking is None:
                return
            try:
                self._save()
            except BookingStoreError:
                self._bookings[booking_id] = booking
                raise
