"""
XP and Leveling System

Computes session XP, token payouts and level thresholds.

Session XP:
- Base: 5 XP per minute of meditation
- Type bonus: Focus +5, Calm +3, Sleep +0
- Breath bonus: breath_score // 10, only when breath tracking was used
- Streak multiplier: +10% per full 5-day streak block, capped at 2x

Tokens: total_xp // 10 + 1 (every session pays at least one token)

Leveling: reaching level L+1 requires (L+1) * 100 cumulative XP.
"""

import math
from typing import Tuple
import logging

from zenni.config import ENABLE_MULTI_LEVEL_UP
from zenni.exceptions import InvalidInputError
from zenni.models.activity import ActivityRecord, ActivityType

logger = logging.getLogger(__name__)

XP_PER_MINUTE = 5

TYPE_BONUS_XP = {
    ActivityType.FOCUS: 5,
    ActivityType.CALM: 3,
    ActivityType.SLEEP: 0,
}

STREAK_BLOCK_DAYS = 5
STREAK_BLOCK_BONUS = 0.1
MAX_STREAK_MULTIPLIER = 2.0

XP_PER_LEVEL = 100


def calculate_base_xp(activity: ActivityRecord) -> int:
    """Duration XP plus the per-type bonus"""
    return activity.duration_minutes * XP_PER_MINUTE + TYPE_BONUS_XP[activity.type]


def calculate_breath_bonus(activity: ActivityRecord) -> int:
    """Breath score bonus, ignored unless breath tracking was used"""
    if not activity.used_breath_tracking:
        return 0
    return activity.breath_score // 10


def calculate_streak_multiplier(current_streak: int) -> float:
    """
    XP multiplier for the streak the user had before this session

    Examples:
        0-4 days   -> 1.0
        5-9 days   -> 1.1
        50+ days   -> 2.0 (cap)
    """
    if current_streak < 0:
        raise InvalidInputError(
            message="Streak cannot be negative",
            field="current_streak",
            value=current_streak,
        )
    blocks = current_streak // STREAK_BLOCK_DAYS
    return min(MAX_STREAK_MULTIPLIER, 1 + blocks * STREAK_BLOCK_BONUS)


def calculate_session_xp(activity: ActivityRecord, current_streak: int) -> int:
    """
    Total XP for a completed session

    Args:
        activity: The completed session
        current_streak: Streak before this session is counted

    Returns:
        XP to award (always >= 1 for supported durations)
    """
    multiplier = calculate_streak_multiplier(current_streak)
    raw_xp = calculate_base_xp(activity) + calculate_breath_bonus(activity)
    # round() absorbs float error in the multiplier before flooring
    return math.floor(round(raw_xp * multiplier, 6))


def calculate_tokens(total_xp: int) -> int:
    """Tokens paid for a session worth total_xp"""
    return total_xp // 10 + 1


def get_xp_for_next_level(current_level: int) -> int:
    """Cumulative XP needed to reach the level after current_level"""
    return (current_level + 1) * XP_PER_LEVEL


def check_level_up(
    new_total_xp: int,
    current_level: int,
    allow_multiple: bool = ENABLE_MULTI_LEVEL_UP
) -> Tuple[int, bool]:
    """
    Apply level-ups for a new cumulative XP total

    By default at most one level is gained per call, even when the XP
    total already covers several thresholds; the remaining levels are
    granted by later sessions.

    Returns:
        (new_level, leveled_up)
    """
    if current_level < 1:
        raise InvalidInputError(
            message="Level must be at least 1",
            field="level",
            value=current_level,
        )

    level = current_level
    while new_total_xp >= get_xp_for_next_level(level):
        level += 1
        if not allow_multiple:
            break

    leveled_up = level > current_level
    if leveled_up:
        logger.debug(f"Level up {current_level} -> {level} at {new_total_xp} XP")
    return level, leveled_up
