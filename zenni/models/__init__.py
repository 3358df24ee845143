"""Data models for activities, progression and loot"""
from zenni.models.activity import ActivityType, ActivityRecord, ALLOWED_DURATIONS
from zenni.models.progression import ProgressionState, RewardOutcome, StreakUpdate
from zenni.models.loot import LootKind, LootDraw, LootClaim, DrawSession, GlowbagRarity

__all__ = [
    "ActivityType",
    "ActivityRecord",
    "ALLOWED_DURATIONS",
    "ProgressionState",
    "RewardOutcome",
    "StreakUpdate",
    "LootKind",
    "LootDraw",
    "LootClaim",
    "DrawSession",
    "GlowbagRarity",
]
