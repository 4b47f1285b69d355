"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware and
exception handlers, and includes all API routers. It serves as the root of
the web server.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from icingaweb.core.logging_config import get_logger, setup_logging
from icingaweb.web.session import InMemorySessionStore, SessionStore

from .api.v1 import health
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import WebContextMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    logger.info(f"Starting up {settings.project_name} (base path {settings.base_path or '/'})...")

    yield

    logger.info(f"Shutting down {settings.project_name}...")


def create_app(session_store: Optional[SessionStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        session_store: Backend for sessions; defaults to a process-local in-memory store

    Returns:
        The configured application
    """
    application = FastAPI(
        title=settings.project_name,
        description="""
        Icinga Web server

        Server-rendered web UI whose responses instruct the client side script
        through X-Icinga-* headers on XHR navigation.
        """,
        version="0.1.0",
        root_path=settings.base_path,
        lifespan=lifespan,
    )

    store = session_store if session_store is not None else InMemorySessionStore(lifetime=settings.session.lifetime)
    application.state.session_store = store
    application.add_middleware(WebContextMiddleware, store=store)

    setup_exception_handlers(application)

    application.include_router(health.router, tags=["health"])
    return application


app = create_app()
