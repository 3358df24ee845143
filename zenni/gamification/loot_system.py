"""
Glow Card Loot System

After a session the user picks a face-down glow card. Each pick is one
weighted draw over a fixed table:

| Roll        | Outcome                      | Weight |
|-------------|------------------------------|--------|
| 0.00 - 0.45 | tokens (25 / 35 / 50)        | 45%    |
| 0.45 - 0.65 | common glowbag               | 20%    |
| 0.65 - 0.75 | rare glowbag                 | 10%    |
| 0.75 - 0.85 | streak saver                 | 10%    |
| 0.85 - 0.95 | extra pick                   | 10%    |
| 0.95 - 1.00 | rare glowbag (rarer tier)    |  5%    |

Streak savers are capped; a saver won at the cap pays out tokens instead.
A glowbag is opened as soon as it is drawn, rolling the rarity of the
cosmetic inside (legendary 3%, epic 12%, rare 25%, common 60%).
Extra picks add a pick to the current reveal rather than paying out.
Plus users can buy one more pick with tokens once their picks run out.
"""

import random
from typing import Optional
import logging

from zenni.config import PAID_PICK_COST, STREAK_SAVER_CAP, STREAK_SAVER_OVERFLOW_TOKENS
from zenni.exceptions import InvalidInputError
from zenni.models.loot import DrawSession, GlowbagRarity, LootClaim, LootDraw, LootKind
from zenni.models.progression import ProgressionState

logger = logging.getLogger(__name__)

TOKEN_AMOUNTS = (25, 35, 50)

# Cumulative upper bounds over a uniform [0, 1) roll
LOOT_TABLE: list[tuple[float, LootKind]] = [
    (0.45, LootKind.TOKENS),
    (0.65, LootKind.COMMON_BAG),
    (0.75, LootKind.RARE_BAG),
    (0.85, LootKind.STREAK_SAVER),
    (0.95, LootKind.EXTRA_PICK),
    # Placeholder for a rarer bag tier
    (1.00, LootKind.RARE_BAG),
]

GLOWBAG_ODDS: list[tuple[float, GlowbagRarity]] = [
    (0.03, GlowbagRarity.LEGENDARY),
    (0.15, GlowbagRarity.EPIC),
    (0.40, GlowbagRarity.RARE),
    (1.00, GlowbagRarity.COMMON),
]


def compute_loot_draw(rng: Optional[random.Random] = None) -> LootDraw:
    """
    Draw one glow card

    Args:
        rng: Random source; pass a seeded random.Random for reproducible draws

    Returns:
        LootDraw (amount is set only for token draws)
    """
    rng = rng or random.Random()
    roll = rng.random()

    kind = LOOT_TABLE[-1][1]
    for upper_bound, candidate in LOOT_TABLE:
        if roll < upper_bound:
            kind = candidate
            break

    if kind == LootKind.TOKENS:
        return LootDraw(kind=kind, amount=rng.choice(TOKEN_AMOUNTS))
    return LootDraw(kind=kind)


def apply_loot_draw(
    state: ProgressionState,
    draw: LootDraw,
    streak_saver_cap: int = STREAK_SAVER_CAP
) -> LootClaim:
    """
    Claim a draw against a progression state

    Returns:
        LootClaim with the new state and what was granted. Bags are
        reported in LootClaim.bag; draw_card opens them.
    """
    tokens_granted = 0
    saver_granted = False
    saver_overflow = False
    extra_picks = 0
    bag = None
    streak_savers = state.streak_savers

    if draw.kind == LootKind.TOKENS:
        tokens_granted = draw.amount or 0

    elif draw.kind == LootKind.STREAK_SAVER:
        if streak_savers < streak_saver_cap:
            streak_savers += 1
            saver_granted = True
        else:
            tokens_granted = STREAK_SAVER_OVERFLOW_TOKENS
            saver_overflow = True
            logger.debug(f"Streak saver at cap {streak_saver_cap}, paying {tokens_granted} tokens")

    elif draw.kind == LootKind.EXTRA_PICK:
        extra_picks = 1

    else:
        bag = draw.kind

    new_state = state.model_copy(update={
        "tokens": state.tokens + tokens_granted,
        "streak_savers": streak_savers,
    })

    return LootClaim(
        draw=draw,
        state=new_state,
        tokens_granted=tokens_granted,
        streak_saver_granted=saver_granted,
        streak_saver_overflow=saver_overflow,
        extra_picks_granted=extra_picks,
        bag=bag,
    )


def start_draw_session(picks: int = 1, is_plus_user: bool = False) -> DrawSession:
    """Open a glow card reveal with the given number of free picks"""
    if picks < 1:
        raise InvalidInputError(
            message="A reveal needs at least one pick",
            field="picks",
            value=picks,
        )
    return DrawSession(picks_left=picks, is_plus_user=is_plus_user)


def draw_card(
    session: DrawSession,
    state: ProgressionState,
    rng: Optional[random.Random] = None
) -> LootClaim:
    """
    Spend one pick of the session and claim the drawn card

    The session is updated in place: the pick is consumed and any extra
    pick won is added back. A drawn glowbag is opened with a second roll
    from rng.

    Raises:
        InvalidInputError: If the session has no picks left
    """
    if session.is_complete:
        raise InvalidInputError(
            message="No picks left in this reveal",
            field="picks_left",
            value=session.picks_left,
            operation="draw_card",
        )

    draw = compute_loot_draw(rng)
    claim = apply_loot_draw(state, draw)
    if claim.bag is not None:
        claim = claim.model_copy(update={"bag_rarity": roll_glowbag_rarity(rng)})

    session.draws.append(draw)
    session.picks_left = session.picks_left - 1 + claim.extra_picks_granted

    logger.debug(f"Drew {draw.kind.value}, {session.picks_left} picks left")
    return claim


def buy_paid_pick(
    session: DrawSession,
    state: ProgressionState,
    cost: int = PAID_PICK_COST
) -> ProgressionState:
    """
    Buy one more pick with tokens (Plus users only)

    Returns:
        Progression with the cost deducted; the session gains a pick

    Raises:
        InvalidInputError: Not a Plus user, or not enough tokens
    """
    if not session.is_plus_user:
        raise InvalidInputError(
            message="Paid picks are for Plus users only",
            field="is_plus_user",
            value=False,
            operation="buy_paid_pick",
        )
    if state.tokens < cost:
        raise InvalidInputError(
            message="Not enough tokens",
            field="tokens",
            value=state.tokens,
            operation="buy_paid_pick",
        )

    session.picks_left += 1
    return state.model_copy(update={"tokens": state.tokens - cost})


def roll_glowbag_rarity(rng: Optional[random.Random] = None) -> GlowbagRarity:
    """Rarity of the cosmetic inside an opened glowbag"""
    rng = rng or random.Random()
    roll = rng.random()
    for upper_bound, rarity in GLOWBAG_ODDS:
        if roll < upper_bound:
            return rarity
    return GlowbagRarity.COMMON
