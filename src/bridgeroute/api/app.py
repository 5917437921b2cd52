"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bridgeroute import __version__
from bridgeroute.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: pick live or static chains before the first request
    from bridgeroute.web.controllers.bridge import get_bridge_service

    service = app.dependency_overrides.get(get_bridge_service, get_bridge_service)()
    catalog = await service.bridge.registry.load()
    logger.info(f"Serving {len(catalog.chains)} chains ({catalog.source})")
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Bridgeroute API",
        description="Cross-chain bridge route discovery and quoting",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from bridgeroute.api.routes import health
    from bridgeroute.web.controllers import bridge_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(bridge_router)

    return app


# Default app instance
app = create_app()
