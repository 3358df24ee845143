"""
Service Container - Dependency Injection Container

Holds the infrastructure a deployment chooses (store, clock, random
source) and lazily builds services from it. The API keeps one container
on app.state; nothing reads it as a module-level global.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging
import random

from zenni.store.progression_store import ProgressionStore
from zenni.utils.clock import Clock

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    """

    # Infrastructure dependencies (injected)
    store: ProgressionStore
    clock: Clock
    rng: Optional[random.Random] = None

    # Services (lazy-loaded via properties)
    _reward_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def reward_service(self):
        """Get RewardService instance (lazy-loaded)"""
        if self._reward_service is None:
            from zenni.services.reward_service import RewardService
            self._reward_service = RewardService(self.store, self.clock, self.rng)
            logger.debug("RewardService instantiated")
        return self._reward_service
