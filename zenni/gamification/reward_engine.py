"""
Session Reward Engine

Pure computation of what a completed meditation session is worth for a
given progression state. Nothing here touches storage; RewardService
loads the state, calls compute_session_reward and persists apply_reward's
result in one write.
"""

from datetime import date, tzinfo
from typing import Optional
import logging

from zenni.config import AUTO_USE_STREAK_SAVERS
from zenni.gamification.streak_system import update_streak
from zenni.gamification.xp_system import (
    calculate_session_xp,
    calculate_tokens,
    check_level_up,
    get_xp_for_next_level,
)
from zenni.models.activity import ActivityRecord
from zenni.models.progression import ProgressionState, RewardOutcome
from zenni.utils.clock import Clock, local_date

logger = logging.getLogger(__name__)


def compute_session_reward(
    activity: ActivityRecord,
    state: ProgressionState,
    clock: Clock,
    use_streak_savers: bool = AUTO_USE_STREAK_SAVERS
) -> RewardOutcome:
    """
    Compute rewards for a completed session

    The streak multiplier uses the streak the user had before this
    session; the streak update itself is reported as new_streak.

    Args:
        activity: Completed session
        state: Progression before the session
        clock: Source of "now" for the local day boundary
        use_streak_savers: Spend a banked saver to bridge one missed day

    Returns:
        RewardOutcome (identical for identical inputs)
    """
    now = clock.now()

    xp_gained = calculate_session_xp(activity, state.streak_days)
    tokens_earned = calculate_tokens(xp_gained)

    new_xp = state.xp + xp_gained
    new_level, leveled_up = check_level_up(new_xp, state.level)

    last_date = None
    if state.last_activity_date is not None:
        last_date = local_date(state.last_activity_date, now.tzinfo)

    streak = update_streak(
        current_streak=state.streak_days,
        last_activity_date=last_date,
        activity_date=now.date(),
        streak_savers=state.streak_savers if use_streak_savers else 0,
    )

    return RewardOutcome(
        xp_gained=xp_gained,
        tokens_earned=tokens_earned,
        new_streak=streak.new_streak,
        leveled_up=leveled_up,
        is_first_activity_of_day=streak.is_first_activity_of_day,
        new_xp=new_xp,
        new_level=new_level,
        xp_for_next_level=get_xp_for_next_level(new_level),
        streak_saver_used=streak.streak_saver_used,
    )


def apply_reward(
    state: ProgressionState,
    outcome: RewardOutcome,
    activity_date: date,
    tz: Optional[tzinfo] = None
) -> ProgressionState:
    """
    Progression after a session outcome is applied

    Returns a new state; the input state is left untouched. A stored
    timestamp is replaced by the calendar date in tz.
    """
    streak_savers = state.streak_savers
    if outcome.streak_saver_used:
        streak_savers -= 1

    last_date = activity_date
    if state.last_activity_date is not None:
        last_date = max(activity_date, local_date(state.last_activity_date, tz))

    return state.model_copy(update={
        "xp": outcome.new_xp,
        "level": outcome.new_level,
        "tokens": state.tokens + outcome.tokens_earned,
        "streak_days": outcome.new_streak,
        "last_activity_date": last_date,
        "streak_savers": streak_savers,
    })
