from __future__ import annotations

import logging
from datetime import datetime, timedelta

from barberbot.application.ports.booking_store import BookingFilter, BookingStorePort
from barberbot.domain.entities.booking import ACTIVE_STATUSES, Booking


class DailyReminderUseCase:
    """
    Hook fired once a day by an external scheduler.

    It only reports which of tomorrow's active bookings still have no reminder.
    Nothing is sent and reminder_sent is left untouched.
    """

    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def due_bookings(self, now: datetime) -> list[Booking]:
        tomorrow = now.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)
        bookings = self._store.find(
            BookingFilter(
                scheduled_from=tomorrow,
                scheduled_until=tomorrow + timedelta(days=1),
                statuses=ACTIVE_STATUSES,
            )
        )
        return [b for b in bookings if not b.reminder_sent]

    def run(self, now: datetime) -> int:
        due = self.due_bookings(now)
        self._logger.info("⏰ Daily reminder run", extra={"reason": f"{len(due)} bookings due tomorrow"})
        return len(due)
