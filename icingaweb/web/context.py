"""
Request-scoped context.

``WebContextMiddleware`` binds the current request and session here so that
code without direct access to them (URL building, ``redirect_and_exit``) can
still reach them.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Optional

from .errors import NoRequestContextError, SessionNotStartedError

if TYPE_CHECKING:
    from .request import Request
    from .session import Session

_current_request: ContextVar[Optional["Request"]] = ContextVar("icingaweb_request", default=None)
_current_session: ContextVar[Optional["Session"]] = ContextVar("icingaweb_session", default=None)


def bind_request(request: "Request") -> Token:
    return _current_request.set(request)


def reset_request(token: Token) -> None:
    _current_request.reset(token)


def bind_session(session: "Session") -> Token:
    return _current_session.set(session)


def reset_session(token: Token) -> None:
    _current_session.reset(token)


def get_current_request() -> "Request":
    request = _current_request.get()
    if request is None:
        raise NoRequestContextError()
    return request


def find_current_request() -> Optional["Request"]:
    return _current_request.get()


def get_current_session() -> "Session":
    session = _current_session.get()
    if session is None:
        raise SessionNotStartedError()
    return session
