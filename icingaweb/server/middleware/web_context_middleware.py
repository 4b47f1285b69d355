"""
Web Context Middleware for FastAPI.

This middleware prepares the per-request context the web layer relies on:
- Binds the current request and session (``icingaweb.web.context``)
- Loads the session from the session store via the session cookie
- Writes a changed session back and sends the session cookie when new
- Logs request duration and slow requests
"""

import time
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from icingaweb.core.logging_config import get_logger
from icingaweb.server.core.config import settings
from icingaweb.web import context
from icingaweb.web.cookie import Cookie
from icingaweb.web.request import Request as WebRequest
from icingaweb.web.session import InMemorySessionStore, Session, SessionStore

logger = get_logger(__name__)


class WebContextMiddleware(BaseHTTPMiddleware):
    """Bind request and session for the duration of a request."""

    def __init__(
        self,
        app: ASGIApp,
        store: Optional[SessionStore] = None,
        cookie_name: Optional[str] = None,
        base_path: Optional[str] = None,
        slow_request_threshold_ms: Optional[float] = None,
    ) -> None:
        super().__init__(app)
        self.store = store if store is not None else InMemorySessionStore(lifetime=settings.session.lifetime)
        self.cookie_name = cookie_name or settings.session.cookie_name
        self.base_path = settings.base_path if base_path is None else base_path
        self.slow_request_threshold_ms = (
            settings.slow_request_threshold_ms if slow_request_threshold_ms is None else slow_request_threshold_ms
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request within a bound web context.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler

        Returns:
            The HTTP response
        """
        start_time = time.time()
        method = request.method
        path = request.url.path

        web_request = WebRequest(request, base_path=self.base_path or None)
        session = Session(self.store, request.cookies.get(self.cookie_name))
        request.state.web_request = web_request
        request.state.session = session

        request_token = context.bind_request(web_request)
        session_token = context.bind_session(session)
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path}",
                exc_info=True,
                extra={"method": method, "path": path, "duration_ms": duration_ms, "error": str(e)},
            )
            raise
        finally:
            context.reset_session(session_token)
            context.reset_request(request_token)

        if session.has_changed():
            session.write()
        # The handler may have written the session already (redirect_and_exit)
        if session.is_new() and not web_request.is_api_request() and session.exists():
            self._send_session_cookie(response, web_request, session)

        duration_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"{method} {path} -> {response.status_code} in {duration_ms:.2f}ms",
            extra={"method": method, "path": path, "status_code": response.status_code, "duration_ms": duration_ms},
        )
        if duration_ms > self.slow_request_threshold_ms:
            logger.warning(
                f"Slow request: {method} {path} took {duration_ms:.2f}ms",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "status_code": response.status_code,
                },
            )

        return response

    def _send_session_cookie(self, response: Response, request: WebRequest, session: Session) -> None:
        cookie_settings = settings.cookie
        Cookie.for_request(
            request,
            self.cookie_name,
            session.get_id(),
            domain=cookie_settings.domain,
            http_only=cookie_settings.http_only,
            samesite=cookie_settings.samesite,
        ).send(response)
