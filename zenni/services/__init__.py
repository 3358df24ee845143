"""
Service layer for zenni rewards

Services own the read-compute-write cycle around the pure reward engine.
"""

from zenni.services.container import ServiceContainer
from zenni.services.reward_service import RewardService, RevealResult

__all__ = [
    "ServiceContainer",
    "RewardService",
    "RevealResult",
]
