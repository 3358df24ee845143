"""API routes for zenni rewards"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request, status

from zenni.api.auth import verify_api_key
from zenni.api.middleware import limiter
from zenni.api.models import (
    HealthCheckResponse,
    LootClaimResponse,
    PlusStatusRequest,
    ProgressionResponse,
    RevealRequest,
    RevealResponse,
    RewardPreviewRequest,
    SessionRewardResponse,
)
from zenni.models.activity import ActivityRecord
from zenni.models.progression import RewardOutcome
from zenni.services.reward_service import RewardService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_reward_service(request: Request) -> RewardService:
    """RewardService from the app's service container"""
    return request.app.state.container.reward_service


@router.post(
    "/api/v1/users/{user_id}/progression",
    response_model=ProgressionResponse,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit("20/minute")
async def create_progression(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    service: RewardService = Depends(get_reward_service)
):
    """Create a progression record for a new user (Rate limit: 20/minute)"""
    state = await service.create_progression(user_id)
    return ProgressionResponse.from_state(user_id, state)


@router.get("/api/v1/users/{user_id}/progression", response_model=ProgressionResponse)
@limiter.limit("60/minute")
async def get_progression(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    service: RewardService = Depends(get_reward_service)
):
    """Get XP, level, tokens and streak (Rate limit: 60/minute)"""
    state = await service.get_progression(user_id)
    return ProgressionResponse.from_state(user_id, state)


@router.put("/api/v1/users/{user_id}/plus", response_model=ProgressionResponse)
@limiter.limit("20/minute")
async def set_plus_status(
    request: Request,
    user_id: str,
    plus: PlusStatusRequest,
    api_key: str = Depends(verify_api_key),
    service: RewardService = Depends(get_reward_service)
):
    """
    Sync the user's Plus subscription (Rate limit: 20/minute)

    Called by the billing backend; paid glow card picks read this flag.
    """
    state = await service.set_plus_status(user_id, plus.is_plus)
    return ProgressionResponse.from_state(user_id, state)


@router.post("/api/v1/users/{user_id}/sessions", response_model=SessionRewardResponse)
@limiter.limit("30/minute")
async def submit_session(
    request: Request,
    user_id: str,
    activity: ActivityRecord,
    api_key: str = Depends(verify_api_key),
    service: RewardService = Depends(get_reward_service)
):
    """
    Submit a completed meditation session and apply its rewards

    Rate limit: 30/minute
    """
    outcome = await service.submit_session(user_id, activity)
    return SessionRewardResponse(user_id=user_id, reward=outcome)


@router.post("/api/v1/users/{user_id}/glow-cards", response_model=RevealResponse)
@limiter.limit("30/minute")
async def reveal_glow_cards(
    request: Request,
    user_id: str,
    reveal: RevealRequest,
    api_key: str = Depends(verify_api_key),
    service: RewardService = Depends(get_reward_service)
):
    """
    Run a glow card reveal, drawing every free, extra and paid pick

    Rate limit: 30/minute
    """
    result = await service.reveal_glow_cards(
        user_id,
        picks=reveal.picks,
        paid_picks=reveal.paid_picks,
    )
    return RevealResponse(
        user_id=user_id,
        cards=[LootClaimResponse.from_claim(c) for c in result.claims],
        paid_picks_used=result.paid_picks_used,
        progression=ProgressionResponse.from_state(user_id, result.state),
    )


@router.post("/api/v1/rewards/preview", response_model=RewardOutcome)
@limiter.limit("60/minute")
async def preview_reward(
    request: Request,
    preview: RewardPreviewRequest,
    api_key: str = Depends(verify_api_key),
    service: RewardService = Depends(get_reward_service)
):
    """Price a session without saving anything (Rate limit: 60/minute)"""
    return service.preview_session(preview.activity, preview.progression)


@router.get("/health", response_model=HealthCheckResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Health check endpoint (Rate limit: 60/minute for monitoring systems)"""
    return HealthCheckResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc)
    )
