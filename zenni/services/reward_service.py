"""
RewardService - Reward Business Logic

Loads a user's progression from the injected store, runs the reward
engine and writes the new state back in a single upsert. A failure at any
step leaves the stored record untouched, so a reward is granted entirely
or not at all.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from zenni.exceptions import ProgressionNotFoundError, wrap_store_exception
from zenni.gamification import (
    apply_reward,
    buy_paid_pick,
    compute_session_reward,
    draw_card,
    start_draw_session,
)
from zenni.models.activity import ActivityRecord
from zenni.models.loot import LootClaim
from zenni.models.progression import ProgressionState, RewardOutcome
from zenni.store.progression_store import ProgressionStore
from zenni.utils.clock import Clock

logger = logging.getLogger(__name__)


@dataclass
class RevealResult:
    """Every card drawn in one glow card reveal and the resulting state"""
    claims: List[LootClaim] = field(default_factory=list)
    state: Optional[ProgressionState] = None
    paid_picks_used: int = 0


class RewardService:
    """
    Service for session rewards and glow card reveals.

    Responsibilities:
    - Session XP, tokens, streak and level updates
    - Glow card reveals (free, extra and paid picks)
    - Surfacing store errors unmodified (NotFound) or wrapped once
      (UpstreamFailure), never retried
    """

    def __init__(
        self,
        store: ProgressionStore,
        clock: Clock,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize RewardService.

        Args:
            store: Progression record store
            clock: Source of "now" for streak day boundaries
            rng: Random source for loot draws (seed it in tests)
        """
        self.store = store
        self.clock = clock
        self.rng = rng or random.Random()
        logger.debug("RewardService initialized")

    async def _load(self, user_id: str, operation: str) -> ProgressionState:
        try:
            return await self.store.get_progression(user_id)
        except ProgressionNotFoundError:
            raise
        except Exception as e:
            raise wrap_store_exception(e, operation=operation, user_id=user_id) from e

    async def _save(self, user_id: str, state: ProgressionState, operation: str) -> None:
        try:
            await self.store.upsert_progression(user_id, state)
        except Exception as e:
            raise wrap_store_exception(e, operation=operation, user_id=user_id) from e

    async def get_progression(self, user_id: str) -> ProgressionState:
        """Current progression for user_id"""
        return await self._load(user_id, "get_progression")

    async def create_progression(self, user_id: str) -> ProgressionState:
        """Create a fresh progression record (idempotent)"""
        try:
            return await self.store.create_progression(user_id)
        except Exception as e:
            raise wrap_store_exception(e, operation="create_progression", user_id=user_id) from e

    async def set_plus_status(self, user_id: str, is_plus: bool) -> ProgressionState:
        """Record whether the user holds an active Plus subscription"""
        state = await self._load(user_id, "set_plus_status")
        new_state = state.model_copy(update={"is_plus": is_plus})
        await self._save(user_id, new_state, "set_plus_status")

        logger.info(f"User {user_id} Plus status set to {is_plus}")
        return new_state

    def preview_session(
        self,
        activity: ActivityRecord,
        state: Optional[ProgressionState] = None
    ) -> RewardOutcome:
        """Rewards a session would earn, without touching the store"""
        return compute_session_reward(activity, state or ProgressionState(), self.clock)

    async def submit_session(self, user_id: str, activity: ActivityRecord) -> RewardOutcome:
        """
        Reward a completed meditation session.

        Args:
            user_id: User identifier
            activity: Completed session

        Returns:
            RewardOutcome for the session

        Raises:
            ProgressionNotFoundError: No record for user_id
            UpstreamFailureError: The store failed; nothing was granted
        """
        state = await self._load(user_id, "submit_session")

        outcome = compute_session_reward(activity, state, self.clock)
        now = self.clock.now()
        new_state = apply_reward(state, outcome, now.date(), now.tzinfo)

        await self._save(user_id, new_state, "submit_session")

        logger.info(
            f"Rewarded {user_id} for {activity.duration_minutes} min {activity.type.value}: "
            f"+{outcome.xp_gained} XP, +{outcome.tokens_earned} tokens, "
            f"streak {state.streak_days} → {outcome.new_streak}"
        )
        if outcome.leveled_up:
            logger.info(f"User {user_id} leveled up from {state.level} to {outcome.new_level}!")

        return outcome

    async def reveal_glow_cards(
        self,
        user_id: str,
        picks: int = 1,
        paid_picks: int = 0
    ) -> RevealResult:
        """
        Run a full glow card reveal.

        Free picks are drawn first, extra picks won along the way are drawn
        until none remain, then each paid pick is bought and drawn the same
        way. Paid picks need the Plus entitlement on the stored record. All
        claims are persisted together at the end.

        Raises:
            InvalidInputError: Paid picks requested without Plus or tokens
            ProgressionNotFoundError: No record for user_id
            UpstreamFailureError: The store failed; nothing was granted
        """
        state = await self._load(user_id, "reveal_glow_cards")
        session = start_draw_session(picks=picks, is_plus_user=state.is_plus)
        result = RevealResult()

        while True:
            while not session.is_complete:
                claim = draw_card(session, state, self.rng)
                state = claim.state
                result.claims.append(claim)

            if result.paid_picks_used >= paid_picks:
                break
            state = buy_paid_pick(session, state)
            result.paid_picks_used += 1

        await self._save(user_id, state, "reveal_glow_cards")
        result.state = state

        logger.info(
            f"User {user_id} revealed {len(result.claims)} glow cards "
            f"({result.paid_picks_used} paid): "
            f"{', '.join(c.draw.kind.value for c in result.claims)}"
        )
        return result
