from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


ACTIVE_STATUSES: frozenset[BookingStatus] = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


@dataclass(frozen=True)
class BookingDraft:
    customer_handle: str
    scheduled_at: datetime
    customer_name: str = ""
    status: BookingStatus = BookingStatus.PENDING
    reminder_sent: bool = False


@dataclass(frozen=True)
class Booking:
    id: str
    customer_handle: str
    scheduled_at: datetime
    status: BookingStatus
    created_at: datetime
    customer_name: str = ""
    reminder_sent: bool = False
