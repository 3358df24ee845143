"""Meditation activity models"""
from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Session lengths offered by the meditation picker, in minutes
ALLOWED_DURATIONS: tuple[int, ...] = (5, 10, 15, 20)


class ActivityType(str, Enum):
    """Meditation types"""
    CALM = "Calm"
    FOCUS = "Focus"
    SLEEP = "Sleep"

    @classmethod
    def _missing_(cls, value: object):
        # Older clients send lowercase type names
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class ActivityRecord(BaseModel):
    """
    A completed meditation session

    breath_score is always accepted in range even when breath tracking
    was not used; it only earns a bonus when used_breath_tracking is true.
    """
    model_config = ConfigDict(frozen=True)

    type: ActivityType
    duration_minutes: int = Field(..., description="Session length in minutes")
    breath_score: int = Field(default=0, ge=0, le=100, description="Breath tracker score 0-100")
    used_breath_tracking: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            member = ActivityType._missing_(v)
            return member if member is not None else v
        return v

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        """Only the fixed session lengths are rewarded"""
        if v not in ALLOWED_DURATIONS:
            allowed = ", ".join(str(d) for d in ALLOWED_DURATIONS)
            raise ValueError(f"Duration must be one of {allowed} minutes")
        return v
