"""Global test fixtures and utilities for zenni reward tests"""
import random
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from zenni.models.activity import ActivityRecord, ActivityType
from zenni.models.progression import ProgressionState
from zenni.services.reward_service import RewardService
from zenni.store.progression_store import InMemoryProgressionStore
from zenni.utils.clock import FixedClock

TEST_TIMEZONE = ZoneInfo("Europe/Stockholm")


class ScriptedRandom(random.Random):
    """random.Random whose random() replays a fixed list of rolls"""

    def __init__(self, rolls, seed=0):
        super().__init__(seed)
        self._rolls = list(rolls)

    def random(self):
        return self._rolls.pop(0)

    def getrandbits(self, k):
        # Keeps choice() on the seeded generator instead of the scripted rolls
        return super().getrandbits(k)


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def test_now():
    """Sunday morning, local time"""
    return datetime(2024, 3, 10, 8, 0, tzinfo=TEST_TIMEZONE)


@pytest.fixture
def test_today(test_now):
    return test_now.date()


@pytest.fixture
def fixed_clock(test_now):
    """Clock pinned to test_now"""
    return FixedClock(test_now)


# ============================================================================
# Activity & Progression Fixtures
# ============================================================================

@pytest.fixture
def focus_activity():
    """10 minute Focus session with a tracked breath score of 80"""
    return ActivityRecord(
        type=ActivityType.FOCUS,
        duration_minutes=10,
        breath_score=80,
        used_breath_tracking=True,
    )


@pytest.fixture
def new_user_state():
    return ProgressionState()


@pytest.fixture
def active_user_state():
    """User on a 4 day streak who last meditated yesterday"""
    return ProgressionState(
        xp=150,
        level=1,
        tokens=40,
        streak_days=4,
        last_activity_date=date(2024, 3, 9),
        streak_savers=1,
    )


# ============================================================================
# Random Source Fixtures
# ============================================================================

@pytest.fixture
def scripted_rng():
    """Factory for a random source that replays the given rolls"""
    def _create(*rolls):
        return ScriptedRandom(rolls)
    return _create


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def memory_store():
    return InMemoryProgressionStore()


@pytest.fixture
def reward_service(memory_store, fixed_clock, seeded_rng):
    return RewardService(memory_store, fixed_clock, seeded_rng)
