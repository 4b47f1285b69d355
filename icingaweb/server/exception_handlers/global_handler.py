"""
Global Exception Handler for FastAPI Application.

This module provides a global exception handler that catches all unhandled
exceptions and logs detailed information including error ID, request context,
and full traceback for debugging purposes.

The reply goes through the web layer: API clients get a JSend error envelope,
browser and XHR requests get a short HTML page. Both carry the error ID.
"""

import html
import traceback
import uuid

from fastapi import Request
from starlette.responses import Response as StarletteResponse

from icingaweb.core.logging_config import get_logger
from icingaweb.web.request import Request as WebRequest
from icingaweb.web.response import Response

logger = get_logger(__name__)

ERROR_MESSAGE = "Internal server error"


def _web_request(request: Request) -> WebRequest:
    web_request = getattr(request.state, "web_request", None)
    return web_request if isinstance(web_request, WebRequest) else WebRequest(request)


async def global_exception_handler(request: Request, exc: Exception) -> StarletteResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and answers with a 500 carrying an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        The rendered 500 response
    """
    error_id = uuid.uuid4().hex
    web_request = _web_request(request)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {web_request.get_path()}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": web_request.get_path(),
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    response = Response(web_request)
    response.set_http_response_code(500)
    if web_request.is_api_request():
        return response.json().set_error_message(f"{ERROR_MESSAGE} (error ID: {error_id})").send_response()

    response.set_body(
        f"<h1>{ERROR_MESSAGE}</h1>\n"
        f"<p>{html.escape(type(exc).__name__)}, error ID: <code>{error_id}</code></p>\n"
    )
    return response.send_response()
