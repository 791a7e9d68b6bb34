from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from enum import Enum

from barberbot.application.ports.booking_store import BookingFilter, BookingStorePort, handle_digits
from barberbot.application.use_cases.slot_resolver import SlotLocks, SlotResolver
from barberbot.application.utils.date_parser import parse_datetime_phrase
from barberbot.domain.entities.booking import ACTIVE_STATUSES, Booking, BookingDraft, BookingStatus
from barberbot.domain.entities.booking_result import (
    AmbiguousTarget,
    CancelResult,
    Cancelled,
    ConfirmResult,
    Confirmed,
    Created,
    CreateResult,
    NotFound,
    ParseFailed,
    SlotUnavailable,
)

MIN_SUFFIX_DIGITS = 4


class ListScope(str, Enum):
    TODAY = "today"
    UPCOMING = "upcoming"
    OWN = "own"


class BookingService:
    def __init__(
        self,
        store: BookingStorePort,
        slot_resolver: SlotResolver | None = None,
        slot_locks: SlotLocks | None = None,
    ) -> None:
        self._store = store
        self._slot_resolver = slot_resolver or SlotResolver(store)
        self._slot_locks = slot_locks if slot_locks is not None else SlotLocks()
        self._logger = logging.getLogger(__name__)

    def create_booking(
        self,
        customer_handle: str,
        customer_name: str,
        requested_phrase: str,
        now: datetime,
    ) -> CreateResult:
        requested = parse_datetime_phrase(requested_phrase, now)
        if requested is None:
            self._logger.info("Booking phrase not understood", extra={"handle": customer_handle, "reason": requested_phrase})
            return ParseFailed(phrase=requested_phrase)

        # Resolve and insert under the same locks so overlapping requests cannot both see a free slot.
        with self._slot_locks.hold(requested):
            available = self._slot_resolver.next_available(requested, now)
            if available != requested:
                return SlotUnavailable(requested=requested, suggested=available)

            booking = self._store.insert(
                BookingDraft(
                    customer_handle=customer_handle,
                    customer_name=customer_name,
                    scheduled_at=requested,
                    status=BookingStatus.PENDING,
                )
            )

        self._logger.info(
            "Booking created",
            extra={"booking_id": booking.id, "handle": customer_handle, "scheduled_at": requested.isoformat()},
        )
        return Created(booking=booking)

    def list_active(self, scope: ListScope, now: datetime, handle: str | None = None) -> list[Booking]:
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)

        if scope == ListScope.TODAY:
            booking_filter = BookingFilter(
                scheduled_from=today,
                scheduled_until=today + timedelta(days=1),
                statuses=ACTIVE_STATUSES,
            )
        elif scope == ListScope.UPCOMING:
            booking_filter = BookingFilter(scheduled_from=today, statuses=ACTIVE_STATUSES)
        else:
            if not handle:
                raise ValueError("handle is required to list own bookings")
            booking_filter = BookingFilter(customer_handle=handle, statuses=ACTIVE_STATUSES)

        return self._store.find(booking_filter)

    def confirm(self, token: str) -> ConfirmResult:
        target = self._resolve_target(token, frozenset({BookingStatus.PENDING}))
        if not isinstance(target, Booking):
            return target

        self._store.update(target.id, status=BookingStatus.CONFIRMED)
        self._logger.info("Booking confirmed", extra={"booking_id": target.id, "handle": target.customer_handle})
        return Confirmed(booking=replace(target, status=BookingStatus.CONFIRMED))

    def cancel_by_handle(self, token: str) -> CancelResult:
        target = self._resolve_target(token, ACTIVE_STATUSES)
        if not isinstance(target, Booking):
            return target

        self._store.delete(target.id)
        self._logger.info("Booking cancelled by owner", extra={"booking_id": target.id, "handle": target.customer_handle})
        return Cancelled(booking=target)

    def cancel_own_latest_pending(self, handle: str) -> NotFound | Cancelled:
        booking = self._store.find_one(
            BookingFilter(customer_handle=handle, statuses=frozenset({BookingStatus.PENDING})),
            descending=True,
        )
        if booking is None:
            return NotFound(token=handle)

        self._store.delete(booking.id)
        self._logger.info("Booking cancelled by customer", extra={"booking_id": booking.id, "handle": handle})
        return Cancelled(booking=booking)

    def _resolve_target(
        self,
        token: str,
        statuses: frozenset[BookingStatus],
    ) -> Booking | NotFound | AmbiguousTarget:
        """
        Resolve an admin token to one booking.

        An exact handle wins. Otherwise the token's digits are matched against the
        end of each handle (at least MIN_SUFFIX_DIGITS digits), which is what the
        admin listing shows. When several bookings of one customer qualify, the
        earliest scheduled one is picked.
        """
        exact = self._store.find_one(BookingFilter(customer_handle=token, statuses=statuses))
        if exact is not None:
            return exact

        digits = handle_digits(token)
        if len(digits) < MIN_SUFFIX_DIGITS:
            return NotFound(token=token)

        candidates = self._store.find(BookingFilter(handle_suffix=digits, statuses=statuses))
        handles = tuple(dict.fromkeys(b.customer_handle for b in candidates))
        if not handles:
            return NotFound(token=token)
        if len(handles) > 1:
            return AmbiguousTarget(token=token, handles=handles)
        return candidates[0]
