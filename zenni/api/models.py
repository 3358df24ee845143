"""Pydantic models for API request/response validation"""
from datetime import date, datetime
from typing import Optional, List, Union
from pydantic import BaseModel, Field

from zenni.gamification import get_xp_for_next_level
from zenni.models.activity import ActivityRecord
from zenni.models.loot import GlowbagRarity, LootClaim, LootKind
from zenni.models.progression import ProgressionState, RewardOutcome

# Cards laid out in one reveal
MAX_PICKS_PER_REVEAL = 5


class ProgressionResponse(BaseModel):
    """Response with a user's progression"""
    user_id: str
    xp: int
    level: int
    xp_for_next_level: int
    tokens: int
    streak_days: int
    streak_savers: int
    is_plus: bool = False
    last_activity_date: Optional[Union[datetime, date]] = None

    @classmethod
    def from_state(cls, user_id: str, state: ProgressionState) -> "ProgressionResponse":
        return cls(
            user_id=user_id,
            xp_for_next_level=get_xp_for_next_level(state.level),
            **state.model_dump(),
        )


class SessionRewardResponse(BaseModel):
    """Rewards for a submitted meditation session"""
    user_id: str
    reward: RewardOutcome


class RewardPreviewRequest(BaseModel):
    """Request to price a session without saving it"""
    activity: ActivityRecord
    progression: Optional[ProgressionState] = Field(
        default=None,
        description="Progression to price against (defaults to a new user)"
    )


class RevealRequest(BaseModel):
    """Request to run a glow card reveal"""
    picks: int = Field(default=1, ge=1, le=MAX_PICKS_PER_REVEAL, description="Free picks")
    paid_picks: int = Field(
        default=0,
        ge=0,
        le=MAX_PICKS_PER_REVEAL,
        description="Picks bought with tokens (needs Plus on the user record)"
    )


class PlusStatusRequest(BaseModel):
    """Subscription sync from the billing backend"""
    is_plus: bool


class LootClaimResponse(BaseModel):
    """One revealed glow card"""
    kind: LootKind
    amount: Optional[int] = None
    tokens_granted: int
    streak_saver_granted: bool
    streak_saver_overflow: bool
    extra_picks_granted: int
    bag_rarity: Optional[GlowbagRarity] = None

    @classmethod
    def from_claim(cls, claim: LootClaim) -> "LootClaimResponse":
        return cls(
            kind=claim.draw.kind,
            amount=claim.draw.amount,
            tokens_granted=claim.tokens_granted,
            streak_saver_granted=claim.streak_saver_granted,
            streak_saver_overflow=claim.streak_saver_overflow,
            extra_picks_granted=claim.extra_picks_granted,
            bag_rarity=claim.bag_rarity,
        )


class RevealResponse(BaseModel):
    """All cards from a reveal plus the resulting progression"""
    user_id: str
    cards: List[LootClaimResponse]
    paid_picks_used: int
    progression: ProgressionResponse


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Check timestamp")
