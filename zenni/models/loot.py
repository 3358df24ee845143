"""Glow card loot models"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from zenni.models.progression import ProgressionState


class LootKind(str, Enum):
    """Possible glow card outcomes"""
    TOKENS = "tokens"
    COMMON_BAG = "common_bag"
    RARE_BAG = "rare_bag"
    STREAK_SAVER = "streak_saver"
    EXTRA_PICK = "extra_pick"


class GlowbagRarity(str, Enum):
    """Rarity tiers rolled when a glowbag is opened"""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class LootDraw(BaseModel):
    """A single glow card reveal"""
    model_config = ConfigDict(frozen=True)

    kind: LootKind
    amount: Optional[int] = None


class LootClaim(BaseModel):
    """The effect of claiming a draw against a progression state"""
    model_config = ConfigDict(frozen=True)

    draw: LootDraw
    state: ProgressionState
    tokens_granted: int = 0
    streak_saver_granted: bool = False
    streak_saver_overflow: bool = False
    extra_picks_granted: int = 0
    bag: Optional[LootKind] = None
    bag_rarity: Optional[GlowbagRarity] = None


class DrawSession(BaseModel):
    """
    One glow card reveal with its remaining picks

    Extra picks won during the reveal are added to picks_left, so the
    session is only complete once every pick has been resolved.
    """
    picks_left: int = Field(default=1, ge=0)
    is_plus_user: bool = False
    draws: list[LootDraw] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.picks_left == 0
