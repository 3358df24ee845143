"""Rate limiting and CORS for the rewards API"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from zenni.config import CORS_ORIGINS, RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

# Per-route limits are declared on the endpoints in routes.py
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

# Every route is a GET, POST or PUT with a bearer token and a JSON body
CORS_METHODS = ["GET", "POST", "PUT"]
CORS_HEADERS = ["Authorization", "Content-Type"]


def setup_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    logger.info(f"CORS configured for origins: {CORS_ORIGINS}")


def setup_rate_limiting(app: FastAPI) -> None:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    logger.info(f"Rate limiting {'enabled' if limiter.enabled else 'disabled'}")
