from __future__ import annotations

import logging
import threading
from contextlib import ExitStack, contextmanager
from datetime import datetime, timedelta
from typing import Iterator

from barberbot.application.ports.booking_store import BookingFilter, BookingStorePort
from barberbot.domain.entities.booking import ACTIVE_STATUSES

SLOT_LENGTH = timedelta(hours=1)


def hour_bucket(moment: datetime) -> datetime:
    return moment.replace(minute=0, second=0, microsecond=0)


def snap_to_half_hour(moment: datetime) -> datetime:
    """10:10 -> 10:30, 10:45 -> 11:00."""
    if moment.minute < 30:
        return moment.replace(minute=30, second=0, microsecond=0)
    return hour_bucket(moment) + timedelta(hours=1)


class SlotResolver:
    """Find the earliest free 1-hour slot at or after a requested time."""

    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def is_occupied(self, candidate: datetime) -> bool:
        # Taken when a booking starts in the candidate's hour bucket or within the next hour.
        booking_filter = BookingFilter(
            scheduled_from=hour_bucket(candidate),
            scheduled_until=candidate + SLOT_LENGTH,
            statuses=ACTIVE_STATUSES,
        )
        return self._store.find_one(booking_filter) is not None

    def next_available(self, requested: datetime, now: datetime) -> datetime:
        candidate = requested
        if candidate <= now:
            candidate = snap_to_half_hour(candidate)

        while self.is_occupied(candidate):
            candidate = hour_bucket(candidate) + timedelta(hours=1)

        if candidate != requested:
            self._logger.info(
                "Requested slot moved",
                extra={"scheduled_at": requested.isoformat(), "reason": f"next free {candidate.isoformat()}"},
            )
        return candidate


class SlotLocks:
    """One lock per hour bucket, serializing check-then-create for overlapping slots."""

    def __init__(self) -> None:
        # bucket -> (lock, holders and waiters); an entry is dropped once nobody uses it
        self._locks: dict[datetime, tuple[threading.Lock, int]] = {}
        self._lock_lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock_lock:
            return len(self._locks)

    def _acquire(self, bucket: datetime) -> threading.Lock:
        with self._lock_lock:
            lock, users = self._locks.get(bucket, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[bucket] = (lock, users + 1)
        lock.acquire()
        return lock

    def _release(self, bucket: datetime, lock: threading.Lock) -> None:
        lock.release()
        with self._lock_lock:
            _, users = self._locks[bucket]
            if users == 1:
                del self._locks[bucket]
            else:
                self._locks[bucket] = (lock, users - 1)

    @contextmanager
    def hold(self, moment: datetime) -> Iterator[None]:
        """Hold the buckets of moment's hour and both neighbours, in ascending order."""
        bucket = hour_bucket(moment)
        buckets = [bucket - timedelta(hours=1), bucket, bucket + timedelta(hours=1)]
        with ExitStack() as stack:
            for each in buckets:
                lock = self._acquire(each)
                stack.callback(self._release, each, lock)
            yield
