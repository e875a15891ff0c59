"""Goal completion and time left."""

import math
from datetime import datetime, time, timezone
from typing import Optional

from components.core.money import percent_of
from components.goal.models import Goal
from components.goal.schemas import GoalProgress, GoalStatus

SECONDS_PER_DAY = 86400


def remaining_days(target_date, now: datetime) -> int:
    """Whole days until midnight UTC of ``target_date``, rounded up; negative once past."""
    deadline = datetime.combine(target_date, time.min, tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.ceil((deadline - now).total_seconds() / SECONDS_PER_DAY)


def goal_status(days: int) -> GoalStatus:
    if days < 0:
        return GoalStatus.EXPIRED
    if days == 0:
        return GoalStatus.DUE_TODAY
    return GoalStatus.COUNTDOWN


def goal_progress(goal: Goal, now: Optional[datetime] = None) -> GoalProgress:
    now = now or datetime.now(timezone.utc)
    days = remaining_days(goal.target_date, now)
    return GoalProgress(
        goal_id=goal.id,
        pct=percent_of(goal.current_amount, goal.target_amount),
        remaining_days=days,
        status=goal_status(days),
    )
