"""
Web layer of icingaweb.

Response, request, cookie, URL and session primitives shared by the server.
"""

from .cookie import Cookie, CookieSet
from .errors import (
    HeadersAlreadySentError,
    InvalidCookieError,
    InvalidStatusCodeError,
    NoRequestContextError,
    SessionNotStartedError,
    WebError,
)
from .http_response import HttpResponse
from .json_response import JsonResponse
from .request import Request
from .response import RedirectAndExit, Response
from .session import InMemorySessionStore, Session, SessionNamespace, SessionStore
from .url import Url, UrlParams

__all__ = [
    "Cookie",
    "CookieSet",
    "HeadersAlreadySentError",
    "HttpResponse",
    "InMemorySessionStore",
    "InvalidCookieError",
    "InvalidStatusCodeError",
    "JsonResponse",
    "NoRequestContextError",
    "RedirectAndExit",
    "Request",
    "Response",
    "Session",
    "SessionNamespace",
    "SessionNotStartedError",
    "SessionStore",
    "Url",
    "UrlParams",
    "WebError",
]
