from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ShowAdminMenu:
    pass


@dataclass(frozen=True)
class ListToday:
    pass


@dataclass(frozen=True)
class ListUpcoming:
    pass


@dataclass(frozen=True)
class ConfirmBooking:
    token: str


@dataclass(frozen=True)
class CancelBookingByHandle:
    token: str


@dataclass(frozen=True)
class ShowMainMenu:
    pass


@dataclass(frozen=True)
class ShowBookingPrompt:
    pass


@dataclass(frozen=True)
class ListOwnBookings:
    pass


@dataclass(frozen=True)
class HandoffToHuman:
    pass


@dataclass(frozen=True)
class CancelOwnLatestPending:
    pass


@dataclass(frozen=True)
class AttemptBooking:
    raw_text: str


@dataclass(frozen=True)
class Unhandled:
    pass


Intent = Union[
    ShowAdminMenu,
    ListToday,
    ListUpcoming,
    ConfirmBooking,
    CancelBookingByHandle,
    ShowMainMenu,
    ShowBookingPrompt,
    ListOwnBookings,
    HandoffToHuman,
    CancelOwnLatestPending,
    AttemptBooking,
    Unhandled,
]
