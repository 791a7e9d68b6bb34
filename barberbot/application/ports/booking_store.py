from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from barberbot.domain.entities.booking import Booking, BookingDraft, BookingStatus


@dataclass(frozen=True)
class BookingFilter:
    scheduled_from: datetime | None = None  # inclusive
    scheduled_until: datetime | None = None  # exclusive
    statuses: frozenset[BookingStatus] | None = None
    customer_handle: str | None = None
    handle_suffix: str | None = None  # digits-only suffix of customer_handle

    def matches(self, booking: Booking) -> bool:
        if self.scheduled_from is not None and booking.scheduled_at < self.scheduled_from:
            return False
        if self.scheduled_until is not None and booking.scheduled_at >= self.scheduled_until:
            return False
        if self.statuses is not None and booking.status not in self.statuses:
            return False
        if self.customer_handle is not None and booking.customer_handle != self.customer_handle:
            return False
        if self.handle_suffix is not None and not handle_digits(booking.customer_handle).endswith(self.handle_suffix):
            return False
        return True


def handle_digits(handle: str) -> str:
    """Strip a WhatsApp handle down to its phone digits ("5521...@c.us" -> "5521...")."""
    return "".join(ch for ch in handle.split("@", 1)[0] if ch.isdigit())


class BookingStorePort(ABC):
    @abstractmethod
    def find_one(self, booking_filter: BookingFilter, descending: bool = False) -> Booking | None:
        """Return the first match ordered by scheduled_at, or None."""
        raise NotImplementedError

    @abstractmethod
    def find(self, booking_filter: BookingFilter, descending: bool = False) -> list[Booking]:
        """Return all matches ordered by scheduled_at."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, draft: BookingDraft) -> Booking:
        """Persist a new booking. Assigns id and created_at."""
        raise NotImplementedError

    @abstractmethod
    def update(self, booking_id: str, **patch: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: str) -> None:
        raise NotImplementedError
