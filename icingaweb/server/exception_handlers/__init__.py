"""
Exception handlers for the icingaweb server.

This package contains custom exception handlers for different error types
and a setup function to register them with the FastAPI application.
"""

from fastapi import FastAPI

from icingaweb.core.logging_config import get_logger
from icingaweb.web.response import RedirectAndExit

from .global_handler import global_exception_handler
from .redirect_handler import redirect_and_exit_handler

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    This function should be called during application initialization to set up
    all custom exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(RedirectAndExit, redirect_and_exit_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")


__all__ = ["setup_exception_handlers", "global_exception_handler", "redirect_and_exit_handler"]
