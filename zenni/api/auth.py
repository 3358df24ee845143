"""Bearer API key check for backend callers"""
import hmac
import logging
from fastapi import HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from zenni import config

logger = logging.getLogger(__name__)

security = HTTPBearer()


def is_known_key(api_key: str) -> bool:
    """Constant-time membership test against the configured keys"""
    return any(hmac.compare_digest(api_key.encode(), key.encode()) for key in config.API_KEYS)


async def verify_api_key(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """
    Reject requests without a configured API key

    Keys are read from config on every call so rotated keys apply
    without a restart.

    Raises:
        HTTPException: 503 when no keys are configured, 401 for an unknown key
    """
    if not config.API_KEYS:
        logger.error("No API keys configured, rejecting request")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API authentication not configured"
        )

    if not is_known_key(credentials.credentials):
        logger.warning("Rejected request with unknown API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    return credentials.credentials
