"""
Reward economy for Zenni

- XP, tokens and leveling for meditation sessions
- Daily streaks with streak savers
- Glow card loot draws
"""

from zenni.gamification.xp_system import (
    calculate_session_xp,
    calculate_streak_multiplier,
    calculate_tokens,
    check_level_up,
    get_xp_for_next_level,
)
from zenni.gamification.streak_system import update_streak
from zenni.gamification.reward_engine import compute_session_reward, apply_reward
from zenni.gamification.loot_system import (
    compute_loot_draw,
    apply_loot_draw,
    start_draw_session,
    draw_card,
    buy_paid_pick,
    roll_glowbag_rarity,
)

__all__ = [
    "calculate_session_xp",
    "calculate_streak_multiplier",
    "calculate_tokens",
    "check_level_up",
    "get_xp_for_next_level",
    "update_streak",
    "compute_session_reward",
    "apply_reward",
    "compute_loot_draw",
    "apply_loot_draw",
    "start_draw_session",
    "draw_card",
    "buy_paid_pick",
    "roll_glowbag_rarity",
]
