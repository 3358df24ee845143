"""FastAPI application setup"""
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from zenni import __version__
from zenni.api.middleware import setup_cors, setup_rate_limiting
from zenni.api.routes import router
from zenni.config import DEFAULT_TIMEZONE, LOG_LEVEL
from zenni.exceptions import (
    GENERIC_USER_MESSAGE,
    InvalidInputError,
    ProgressionNotFoundError,
    UpstreamFailureError,
    ZenniError,
    invalid_input_from_errors,
)
from zenni.services.container import ServiceContainer
from zenni.store.progression_store import InMemoryProgressionStore
from zenni.utils.clock import SystemClock

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = [
    (InvalidInputError, 422),
    (ProgressionNotFoundError, 404),
    (UpstreamFailureError, 502),
]


def create_api_application(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        container: Services to serve; defaults to an in-memory store
            and the system clock in DEFAULT_TIMEZONE
    """
    if container is None:
        logger.warning("No service container given - using in-memory progression store (NOT persisted)")
        container = ServiceContainer(
            store=InMemoryProgressionStore(),
            clock=SystemClock(DEFAULT_TIMEZONE),
        )

    app = FastAPI(
        title="Zenni Rewards API",
        description="Reward economy and progression for the Zenni meditation app",
        version=__version__,
    )
    app.state.container = container

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(ZenniError)
    async def zenni_exception_handler(request: Request, exc: ZenniError):
        status_code = 500
        for error_type, code in ERROR_STATUS_CODES:
            if isinstance(exc, error_type):
                status_code = code
                break
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = invalid_input_from_errors(exc.errors(), operation=f"{request.method} {request.url.path}")
        return JSONResponse(status_code=422, content=error.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "user_message": GENERIC_USER_MESSAGE}
        )

    logger.info("FastAPI application created")

    return app


app = create_api_application()
