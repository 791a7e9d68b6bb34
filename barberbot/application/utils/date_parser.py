from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

FRIDAY = 4  # datetime.weekday()

DAY_AFTER_TOMORROW_KEYWORD = "depois de amanhã"
TOMORROW_KEYWORD = "amanhã"
FRIDAY_KEYWORD = "sexta"

TIME_PATTERN = re.compile(r"(\d{1,2})[:h](\d{2})?")


def days_until_friday(weekday: int) -> int:
    """Days to add to reach the next Friday. A Friday maps to the following week."""
    if FRIDAY > weekday:
        return FRIDAY - weekday
    return 7 - weekday + FRIDAY


def parse_time_of_day(text: str) -> tuple[int, int] | None:
    """Extract (hour, minute) from "14:00", "14h30", "9h". Returns None if absent."""
    match = TIME_PATTERN.search(text)
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or "0")
    return (hour, minute)


def parse_datetime_phrase(phrase: str, reference_now: datetime) -> datetime | None:
    """
    Parse a free-text booking request ("amanhã às 14:00", "sexta 10h") into a datetime.

    Day keywords are checked in order: "depois de amanhã", "amanhã", "sexta".
    A bare time that is not after reference_now is moved to the next day.
    Returns None when the phrase cannot be understood.
    """
    try:
        normalized = phrase.lower().strip()
        day = reference_now
        has_day_keyword = True

        if DAY_AFTER_TOMORROW_KEYWORD in normalized:
            day = day + timedelta(days=2)
        elif TOMORROW_KEYWORD in normalized:
            day = day + timedelta(days=1)
        elif FRIDAY_KEYWORD in normalized:
            day = day + timedelta(days=days_until_friday(day.weekday()))
        else:
            has_day_keyword = False

        time_of_day = parse_time_of_day(normalized)
        if time_of_day is None:
            return None
        hour, minute = time_of_day

        result = day.replace(hour=hour, minute=minute, second=0, microsecond=0)

        if not has_day_keyword and result <= reference_now:
            result = result + timedelta(days=1)

        return result
    except (AttributeError, OverflowError, TypeError, ValueError) as e:
        logger.debug("Could not parse datetime phrase", extra={"reason": str(e)})
        return None
