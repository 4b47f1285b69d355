"""
Web Layer Dependencies.

Provides the per-request ``Response`` and ``Session`` for API endpoints.
"""

from typing import Annotated

from fastapi import Depends, Request

from icingaweb.web.context import get_current_session
from icingaweb.web.request import Request as WebRequest
from icingaweb.web.response import Response
from icingaweb.web.session import Session


def get_web_request(request: Request) -> WebRequest:
    """The web request bound by ``WebContextMiddleware``, or a fresh wrapper."""
    web_request = getattr(request.state, "web_request", None)
    if web_request is None:
        web_request = WebRequest(request)
    return web_request


def get_web_response(web_request: Annotated[WebRequest, Depends(get_web_request)]) -> Response:
    return Response(request=web_request)


def get_session() -> Session:
    return get_current_session()


WebRequestDep = Annotated[WebRequest, Depends(get_web_request)]
WebResponseDep = Annotated[Response, Depends(get_web_response)]
SessionDep = Annotated[Session, Depends(get_session)]
