from typing import Callable, Optional

import pytest
from starlette.requests import Request as StarletteRequest

from icingaweb.web import context
from icingaweb.web.request import Request
from icingaweb.web.session import InMemorySessionStore, Session


def build_starlette_request(
    path: str = "/",
    headers: Optional[dict[str, str]] = None,
    scheme: str = "http",
    host: str = "localhost",
    port: int = 80,
    root_path: str = "",
    cookies: Optional[dict[str, str]] = None,
) -> StarletteRequest:
    raw_headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    if cookies:
        cookie_header = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie_header.encode("latin-1")))
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": scheme,
        "server": (host, port),
        "path": root_path + path,
        "root_path": root_path,
        "query_string": b"",
        "headers": raw_headers,
    }
    return StarletteRequest(scope)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory for web requests.

    ``xhr=True`` adds ``X-Requested-With: XMLHttpRequest``, ``api=True`` an
    ``Accept: application/json`` header.
    """

    def _make(xhr: bool = False, api: bool = False, base_path: Optional[str] = None, **kwargs) -> Request:
        headers = dict(kwargs.pop("headers", {}) or {})
        if xhr:
            headers["X-Requested-With"] = "XMLHttpRequest"
        if api:
            headers["Accept"] = "application/json"
        return Request(build_starlette_request(headers=headers, **kwargs), base_path=base_path)

    return _make


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore(lifetime=60)


@pytest.fixture
def bound_session(session_store: InMemorySessionStore):
    """A fresh session bound to the current context."""
    session = Session(session_store)
    token = context.bind_session(session)
    yield session
    context.reset_session(token)


@pytest.fixture
def bound_request(make_request):
    """Bind a request to the current context; call with the request to bind."""
    tokens = []

    def _bind(request: Request) -> Request:
        tokens.append(context.bind_request(request))
        return request

    yield _bind
    for token in reversed(tokens):
        context.reset_request(token)
