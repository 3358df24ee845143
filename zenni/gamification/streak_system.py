"""
Daily Streak Tracking

A streak counts consecutive local calendar days with at least one
completed meditation.

Rules (comparing the last activity date with today):
- No previous activity: streak starts at 1
- Last activity today: streak unchanged, not the first session of the day
- Last activity yesterday: streak + 1
- Otherwise: streak resets to 1

Callers may pass banked streak savers; with at least one, a gap of exactly
one missed day is bridged (+1) and the saver is reported as used. With no
savers passed the four rules above apply as written.
"""

from datetime import date, timedelta
from typing import Optional
import logging

from zenni.exceptions import InvalidInputError
from zenni.models.progression import StreakUpdate

logger = logging.getLogger(__name__)


def update_streak(
    current_streak: int,
    last_activity_date: Optional[date],
    activity_date: date,
    streak_savers: int = 0
) -> StreakUpdate:
    """
    Compute the streak after an activity on activity_date

    Args:
        current_streak: Streak stored before this activity
        last_activity_date: Local date of the previous activity, if any
        activity_date: Local date of this activity
        streak_savers: Savers available to bridge a single missed day

    Returns:
        StreakUpdate with the new streak and first-of-day flag
    """
    if current_streak < 0:
        raise InvalidInputError(
            message="Streak cannot be negative",
            field="current_streak",
            value=current_streak,
        )

    # First activity ever
    if last_activity_date is None:
        return StreakUpdate(new_streak=1, is_first_activity_of_day=True)

    if last_activity_date >= activity_date:
        # Already counted today; a last date in the future (clock skew) is
        # treated the same way rather than breaking the streak
        if last_activity_date > activity_date:
            logger.warning(
                f"Last activity {last_activity_date} is after activity date {activity_date}"
            )
        return StreakUpdate(new_streak=current_streak, is_first_activity_of_day=False)

    if last_activity_date == activity_date - timedelta(days=1):
        return StreakUpdate(new_streak=current_streak + 1, is_first_activity_of_day=True)

    gap_days = (activity_date - last_activity_date).days
    if gap_days == 2 and streak_savers > 0 and current_streak > 0:
        logger.info(f"Streak saver bridged missed day {activity_date - timedelta(days=1)}")
        return StreakUpdate(
            new_streak=current_streak + 1,
            is_first_activity_of_day=True,
            streak_saver_used=True,
        )

    logger.debug(f"Streak broken after {gap_days} days, was {current_streak}")
    return StreakUpdate(new_streak=1, is_first_activity_of_day=True)

