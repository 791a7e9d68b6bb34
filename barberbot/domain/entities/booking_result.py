from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from barberbot.domain.entities.booking import Booking


@dataclass(frozen=True)
class ParseFailed:
    phrase: str


@dataclass(frozen=True)
class SlotUnavailable:
    requested: datetime
    suggested: datetime


@dataclass(frozen=True)
class Created:
    booking: Booking


@dataclass(frozen=True)
class NotFound:
    token: str


@dataclass(frozen=True)
class AmbiguousTarget:
    """More than one customer handle matches a short admin token."""

    token: str
    handles: tuple[str, ...]


@dataclass(frozen=True)
class Confirmed:
    booking: Booking


@dataclass(frozen=True)
class Cancelled:
    booking: Booking


CreateResult = Union[ParseFailed, SlotUnavailable, Created]
ConfirmResult = Union[NotFound, AmbiguousTarget, Confirmed]
CancelResult = Union[NotFound, AmbiguousTarget, Cancelled]
