"""Unit tests for RewardService"""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from zenni.exceptions import InvalidInputError, ProgressionNotFoundError, UpstreamFailureError
from zenni.models.loot import LootKind
from zenni.models.progression import ProgressionState
from zenni.services.container import ServiceContainer
from zenni.services.reward_service import RewardService
from zenni.store.progression_store import InMemoryProgressionStore


class FailingWriteStore(InMemoryProgressionStore):
    """Store whose writes fail after the initial record exists"""

    async def upsert_progression(self, user_id, state):
        raise RuntimeError("write timeout")


# Test submit_session
@pytest.mark.asyncio
async def test_submit_session_persists_outcome(
    reward_service, memory_store, test_user_id, focus_activity, active_user_state, test_today
):
    await memory_store.upsert_progression(test_user_id, active_user_state)

    outcome = await reward_service.submit_session(test_user_id, focus_activity)

    assert outcome.xp_gained == 63
    assert outcome.tokens_earned == 7
    assert outcome.new_streak == 5

    saved = await memory_store.get_progression(test_user_id)
    assert saved.xp == 213
    assert saved.level == 2
    assert saved.tokens == 47
    assert saved.streak_days == 5
    assert saved.last_activity_date == test_today


@pytest.mark.asyncio
async def test_submit_session_twice_same_day(reward_service, test_user_id, focus_activity):
    await reward_service.create_progression(test_user_id)

    first = await reward_service.submit_session(test_user_id, focus_activity)
    second = await reward_service.submit_session(test_user_id, focus_activity)

    assert first.is_first_activity_of_day is True
    assert second.is_first_activity_of_day is False
    assert second.new_streak == 1
    assert second.new_xp == 126


@pytest.mark.asyncio
async def test_submit_session_unknown_user(reward_service, focus_activity):
    with pytest.raises(ProgressionNotFoundError) as exc_info:
        await reward_service.submit_session("nobody", focus_activity)
    assert exc_info.value.user_id == "nobody"


@pytest.mark.asyncio
async def test_not_found_surfaced_unmodified(fixed_clock, focus_activity):
    error = ProgressionNotFoundError(user_id="user-9")
    store = MagicMock()
    store.get_progression = AsyncMock(side_effect=error)
    store.upsert_progression = AsyncMock()
    service = RewardService(store, fixed_clock)

    with pytest.raises(ProgressionNotFoundError) as exc_info:
        await service.submit_session("user-9", focus_activity)

    assert exc_info.value is error
    store.upsert_progression.assert_not_called()


@pytest.mark.asyncio
async def test_store_read_failure_wrapped(fixed_clock, focus_activity):
    store = MagicMock()
    store.get_progression = AsyncMock(side_effect=ConnectionResetError("reset by peer"))
    store.upsert_progression = AsyncMock()
    service = RewardService(store, fixed_clock)

    with pytest.raises(UpstreamFailureError) as exc_info:
        await service.submit_session("user-9", focus_activity)

    assert isinstance(exc_info.value.cause, ConnectionResetError)
    assert exc_info.value.operation == "submit_session"
    store.upsert_progression.assert_not_called()
    # Reads are not retried
    assert store.get_progression.await_count == 1


@pytest.mark.asyncio
async def test_store_write_failure_grants_nothing(fixed_clock, focus_activity, active_user_state, test_user_id):
    store = FailingWriteStore()
    await InMemoryProgressionStore.upsert_progression(store, test_user_id, active_user_state)
    service = RewardService(store, fixed_clock)

    with pytest.raises(UpstreamFailureError):
        await service.submit_session(test_user_id, focus_activity)

    assert await store.get_progression(test_user_id) == active_user_state


# Test preview_session
def test_preview_session_defaults_to_new_user(reward_service, focus_activity):
    outcome = reward_service.preview_session(focus_activity)

    assert outcome.xp_gained == 63
    assert outcome.new_streak == 1


# Test reveal_glow_cards
@pytest.mark.asyncio
async def test_reveal_resolves_every_pick(reward_service, memory_store, test_user_id):
    await memory_store.upsert_progression(test_user_id, ProgressionState(tokens=10))

    result = await reward_service.reveal_glow_cards(test_user_id, picks=3)

    extra_picks = sum(c.extra_picks_granted for c in result.claims)
    assert len(result.claims) == 3 + extra_picks

    granted = sum(c.tokens_granted for c in result.claims)
    saved = await memory_store.get_progression(test_user_id)
    assert saved == result.state
    assert saved.tokens == 10 + granted


@pytest.mark.asyncio
async def test_reveal_with_paid_picks(reward_service, memory_store, test_user_id):
    await memory_store.upsert_progression(test_user_id, ProgressionState(tokens=200, is_plus=True))

    result = await reward_service.reveal_glow_cards(test_user_id, picks=1, paid_picks=2)

    assert result.paid_picks_used == 2
    granted = sum(c.tokens_granted for c in result.claims)
    assert result.state.tokens == 200 - 2 * 50 + granted


@pytest.mark.asyncio
async def test_reveal_paid_pick_without_plus_grants_nothing(
    reward_service, memory_store, test_user_id, scripted_rng
):
    start = ProgressionState(tokens=200)
    await memory_store.upsert_progression(test_user_id, start)
    # Free pick draws tokens, then the paid pick is refused: no Plus on record
    reward_service.rng = scripted_rng(0.1)

    with pytest.raises(InvalidInputError):
        await reward_service.reveal_glow_cards(test_user_id, picks=1, paid_picks=1)

    assert await memory_store.get_progression(test_user_id) == start


@pytest.mark.asyncio
async def test_reveal_saver_overflow(reward_service, memory_store, test_user_id, scripted_rng):
    await memory_store.upsert_progression(test_user_id, ProgressionState(streak_savers=3))
    reward_service.rng = scripted_rng(0.8)

    result = await reward_service.reveal_glow_cards(test_user_id)

    assert result.claims[0].draw.kind == LootKind.STREAK_SAVER
    assert result.claims[0].streak_saver_overflow is True
    assert result.state.streak_savers == 3
    assert result.state.tokens == 25


# Test set_plus_status
@pytest.mark.asyncio
async def test_set_plus_status_enables_paid_picks(reward_service, memory_store, test_user_id):
    await memory_store.upsert_progression(test_user_id, ProgressionState(tokens=60))

    updated = await reward_service.set_plus_status(test_user_id, True)
    result = await reward_service.reveal_glow_cards(test_user_id, paid_picks=1)

    assert updated.is_plus is True
    assert updated.tokens == 60
    assert result.paid_picks_used == 1
    assert (await memory_store.get_progression(test_user_id)).is_plus is True


@pytest.mark.asyncio
async def test_set_plus_status_unknown_user(reward_service):
    with pytest.raises(ProgressionNotFoundError):
        await reward_service.set_plus_status("nobody", True)


@pytest.mark.asyncio
async def test_submit_session_replaces_stored_timestamp(
    reward_service, memory_store, test_user_id, focus_activity, test_today
):
    """A record holding a UTC timestamp from the same local day keeps its streak"""
    await memory_store.upsert_progression(test_user_id, ProgressionState(
        streak_days=4,
        last_activity_date=datetime(2024, 3, 9, 23, 30, tzinfo=timezone.utc),
    ))

    outcome = await reward_service.submit_session(test_user_id, focus_activity)

    assert outcome.is_first_activity_of_day is False
    saved = await memory_store.get_progression(test_user_id)
    assert saved.streak_days == 4
    assert saved.last_activity_date == test_today


# Test ServiceContainer
def test_container_lazy_loads_reward_service(memory_store, fixed_clock):
    container = ServiceContainer(store=memory_store, clock=fixed_clock)

    service = container.reward_service

    assert isinstance(service, RewardService)
    assert container.reward_service is service
    assert service.store is memory_store
