"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from athlinked.core.database import async_session_maker, init_db
from athlinked.core.logging_config import get_logger, setup_logging
from athlinked.core.monitoring import initialize_logfire

from .api.v1 import (
    auth,
    clips,
    favorites,
    health,
    messages,
    network,
    notifications,
    profile,
    profile_sections,
    realtime,
    saves,
    search,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.auth import AuthService

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def purge_expired_tokens() -> int:
    """Drop refresh tokens whose lifetime has passed."""
    async with async_session_maker() as session:
        return await AuthService(session).purge_expired_tokens()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup ensures the tables exist and drops expired refresh tokens.
    A database that cannot be reached is logged without stopping the server.
    """
    # Startup
    try:
        logger.info("Starting up AthLinked Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
    else:
        try:
            await purge_expired_tokens()
        except SQLAlchemyError as e:
            logger.warning(f"Expired refresh token cleanup failed: {e}")

    yield

    # Shutdown
    logger.info("Shutting down AthLinked Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    AthLinked Server API

    Backend for the AthLinked athlete network: accounts, athlete profiles,
    follows and connections, video clips, and real-time messaging between
    connected users.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=constant.API_PREFIX, tags=["auth"])
app.include_router(profile.router, prefix=f"{constant.API_PREFIX}/profile", tags=["profile"])
app.include_router(profile_sections.router, prefix=f"{constant.API_PREFIX}/profile")
app.include_router(network.router, prefix=f"{constant.API_PREFIX}/network", tags=["network"])
app.include_router(clips.router, prefix=f"{constant.API_PREFIX}/clips", tags=["clips"])
app.include_router(saves.router, prefix=f"{constant.API_PREFIX}/save", tags=["saves"])
app.include_router(messages.router, prefix=f"{constant.API_PREFIX}/messages", tags=["messages"])
app.include_router(notifications.router, prefix=f"{constant.API_PREFIX}/notifications", tags=["notifications"])
app.include_router(favorites.router, prefix=f"{constant.API_PREFIX}/favorites", tags=["favorites"])
app.include_router(search.router, prefix=f"{constant.API_PREFIX}/search", tags=["search"])
app.include_router(realtime.router, tags=["realtime"])

initialize_logfire(app)
