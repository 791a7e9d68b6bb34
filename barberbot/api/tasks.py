from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query

from barberbot.application.use_cases.daily_reminder import DailyReminderUseCase
from barberbot.wiring.dependencies import get_daily_reminder_use_case, get_timezone


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/tasks/daily-reminders")
def daily_reminders(
    src: str = Query("unknown"),
    use_case: DailyReminderUseCase = Depends(get_daily_reminder_use_case),
) -> dict[str, int | str]:
    logger.info("Daily reminders triggered", extra={"reason": f"src={src}"})
    due = use_case.run(datetime.now(get_timezone()))
    return {"status": "ok", "due": due}
