"""Progression state and reward outcome models"""
from datetime import date, datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ProgressionState(BaseModel):
    """
    A user's persisted progression record

    last_activity_date is kept as stored. Records written by older clients
    hold a full timestamp; it is reduced to a calendar day in the clock's
    timezone when a session is rewarded.
    """
    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    tokens: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_activity_date: Optional[Union[datetime, date]] = None
    streak_savers: int = Field(default=0, ge=0)
    is_plus: bool = Field(default=False, description="Active Plus subscription")


class StreakUpdate(BaseModel):
    """Result of applying one activity day to a streak"""
    model_config = ConfigDict(frozen=True)

    new_streak: int
    is_first_activity_of_day: bool
    streak_saver_used: bool = False


class RewardOutcome(BaseModel):
    """Rewards earned by one completed session"""
    model_config = ConfigDict(frozen=True)

    xp_gained: int = Field(..., ge=0)
    tokens_earned: int = Field(..., ge=0)
    new_streak: int = Field(..., ge=0)
    leveled_up: bool
    is_first_activity_of_day: bool

    new_xp: int = Field(..., ge=0)
    new_level: int = Field(..., ge=1)
    xp_for_next_level: int
    streak_saver_used: bool = False
