"""
FastAPI application for Squadboard.

- Initializes services with lifespan management
- Configures CORS for frontend integration
- Maps domain errors to HTTP responses
- Provides health check endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from squadboard import __version__
from squadboard.api.dependencies import Services
from squadboard.api.routes import squads_router, websocket_router
from squadboard.chat import ChatAnnouncer
from squadboard.config import Settings, get_settings
from squadboard.exceptions import SquadboardError
from squadboard.leaderboard import LeaderboardBuilder, LeaderboardCache, WinnerSelector
from squadboard.observability import initialize_logfire
from squadboard.services.polymarket import PolymarketClient, PolymarketConfig
from squadboard.storage import (
    MembershipRepository,
    ProfileRepository,
    WinnerRepository,
    create_all,
    dispose_engine,
    get_session_factory,
    init_engine,
)

logger = logging.getLogger(__name__)


def build_services(settings: Settings, market_data: PolymarketClient) -> Services:
    """Wire the leaderboard core to the database and chat collaborators."""
    factory = get_session_factory()
    cache = LeaderboardCache(
        ttl_seconds=settings.leaderboard.cache_ttl_seconds,
        max_entries=settings.leaderboard.cache_max_entries,
    )
    builder = LeaderboardBuilder(
        memberships=MembershipRepository(factory),
        profiles=ProfileRepository(factory),
        market_data=market_data,
        cache=cache,
        anonymous_name=settings.leaderboard.anonymous_name,
        avatar_url_template=settings.leaderboard.avatar_url_template,
        max_members=settings.squads.max_members,
    )
    winners = WinnerSelector(
        builder=builder,
        winners=WinnerRepository(factory),
        announcer=ChatAnnouncer(),
    )
    return Services(builder=builder, winners=winners)


def polymarket_config(settings: Settings) -> PolymarketConfig:
    section = settings.polymarket
    return PolymarketConfig(
        base_url=section.base_url,
        api_key=settings.polymarket_api_key,
        closed_positions_limit=section.closed_positions_limit,
        closed_positions_sort_by=section.closed_positions_sort_by,
        timeout_seconds=section.timeout_seconds,
        max_connections=section.max_connections,
        max_keepalive_connections=section.max_keepalive_connections,
    )


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    When services are passed in, the lifespan skips database and market data
    setup and serves the given services as-is.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if services is not None:
            app.state.services = services
            yield
            return

        engine = init_engine(settings.database_url)
        initialize_logfire(settings, app=app, engine=engine.sync_engine)
        logger.info(f"Starting Squadboard API ({settings.environment})")

        if settings.is_development:
            await create_all()

        market_data = PolymarketClient(polymarket_config(settings))
        await market_data.open()
        app.state.services = build_services(settings, market_data)
        logger.info("Squadboard API startup complete")

        try:
            yield
        finally:
            logger.info("Shutting down Squadboard API")
            await market_data.close()
            await dispose_engine()

    app = FastAPI(
        title="Squadboard API",
        description="Squad PnL leaderboards and weekly MVPs",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SquadboardError)
    async def squadboard_error_handler(request: Request, exc: SquadboardError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, str]:
        """Health check endpoint for load balancers and monitoring."""
        ready = getattr(app.state, "services", None) is not None
        return {
            "status": "healthy" if ready else "starting",
            "service": "squadboard-api",
            "version": __version__,
            "environment": settings.environment,
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        return {
            "name": "Squadboard API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(squads_router)
    app.include_router(websocket_router)

    return app
