"""
FastAPI application initialization and configuration.
"""
import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import settings
from errors import XPublisherError
from .exception_handlers import publisher_error_handler
from .middleware import log_requests_middleware
from .endpoints import (
    auth_router,
    health_router,
    post_router,
    user_router,
)

logger = logging.getLogger(__name__)


def create_app(allowed_origins: Optional[List[str]] = None) -> FastAPI:
    """Build the FastAPI application with middleware, routers and error mapping"""
    app = FastAPI(title="X Post Publisher", version=settings.VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins if allowed_origins is not None else settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests_middleware)

    app.add_exception_handler(XPublisherError, publisher_error_handler)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(post_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app


app = create_app()
