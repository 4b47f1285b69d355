"""
Redirect-and-exit Handler.

``Response.redirect_and_exit()`` leaves the request handler by raising
``RedirectAndExit``. This handler answers with the response it carries, whose
headers were already prepared for the request type (``302`` for full-page
navigation, ``X-Icinga-Redirect`` for XHR).
"""

from fastapi import Request
from starlette.responses import Response

from icingaweb.core.logging_config import get_logger
from icingaweb.web.response import RedirectAndExit

logger = get_logger(__name__)


async def redirect_and_exit_handler(request: Request, exc: RedirectAndExit) -> Response:
    logger.debug(f"Leaving {request.method} {request.url.path} with a redirect")
    return exc.response.send_response()
