"""
Cookies.

``Cookie`` holds everything the client needs to store a cookie; ``CookieSet``
batches the cookies a response sends. Transmission itself is delegated to
``starlette.responses.Response.set_cookie`` when the response is rendered.
"""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterator, Optional

from starlette.responses import Response as StarletteResponse

from .errors import InvalidCookieError

if TYPE_CHECKING:
    from .request import Request

INVALID_NAME_CHARACTERS = "=,; \t\r\n\v\f"

_INVALID_NAME = re.compile("[" + re.escape(INVALID_NAME_CHARACTERS) + "]")


class Cookie:
    """A cookie which is to be sent to the client.

    ``expire`` is a unix timestamp; ``None`` makes it a session cookie.
    ``path`` and ``secure`` left at ``None`` are resolved from the request
    when the cookie is built with :meth:`for_request` or sent by a web
    ``Response``; on their own they mean ``/`` and "not secure".
    """

    def __init__(
        self,
        name: str,
        value: Optional[str] = None,
        expire: Optional[int] = None,
        path: Optional[str] = None,
        domain: Optional[str] = None,
        secure: Optional[bool] = None,
        http_only: bool = True,
        samesite: Optional[str] = "lax",
    ) -> None:
        if not name:
            raise InvalidCookieError("Cookie name can't be empty")
        if _INVALID_NAME.search(name):
            raise InvalidCookieError(
                f"Cookie name can't contain these characters: {INVALID_NAME_CHARACTERS!r} ({name!r} given)"
            )
        self.name = name
        self.value = value
        self.expire = expire
        self.path = path
        self.domain = domain
        self.secure = secure
        self.http_only = http_only
        self.samesite = samesite

    @classmethod
    def for_request(cls, request: "Request", name: str, value: Optional[str] = None, **kwargs) -> "Cookie":
        """Build a cookie whose path and secure flag default to the request's."""
        return cls(name, value, **kwargs).apply_request_defaults(request)

    def apply_request_defaults(self, request: "Request") -> "Cookie":
        """Fill in an unset path and secure flag from ``request``."""
        if self.path is None:
            self.path = request.get_base_path() or "/"
        if self.secure is None:
            self.secure = request.is_secure()
        return self

    def get_path(self) -> str:
        return self.path or "/"

    def is_secure(self) -> bool:
        return bool(self.secure)

    def is_http_only(self) -> bool:
        return self.http_only

    def forget(self) -> "Cookie":
        """Instruct the client to delete this cookie."""
        self.value = ""
        self.expire = 1
        return self

    def max_age(self, now: Optional[float] = None) -> Optional[int]:
        """Seconds until expiry, ``None`` for session cookies."""
        if self.expire is None:
            return None
        now = time.time() if now is None else now
        return max(0, int(self.expire - now))

    def expires_at(self) -> Optional[datetime]:
        if self.expire is None:
            return None
        return datetime.fromtimestamp(self.expire, tz=timezone.utc)

    def send(self, response: StarletteResponse) -> None:
        """Emit this cookie as a ``Set-Cookie`` header on ``response``."""
        response.set_cookie(
            key=self.name,
            value=self.value or "",
            max_age=self.max_age(),
            expires=self.expires_at(),
            path=self.get_path(),
            domain=self.domain,
            secure=self.is_secure(),
            httponly=self.http_only,
            samesite=self.samesite,
        )

    def __repr__(self) -> str:
        return f"Cookie(name={self.name!r}, path={self.get_path()!r}, expire={self.expire!r})"


class CookieSet:
    """Cookies keyed by name; adding a known name replaces the old cookie."""

    def __init__(self) -> None:
        self._cookies: dict[str, Cookie] = {}

    def add(self, cookie: Cookie) -> "CookieSet":
        self._cookies[cookie.name] = cookie
        return self

    def get(self, name: str) -> Optional[Cookie]:
        return self._cookies.get(name)

    def remove(self, name: str) -> "CookieSet":
        self._cookies.pop(name, None)
        return self

    def __contains__(self, name: object) -> bool:
        return name in self._cookies

    def __iter__(self) -> Iterator[Cookie]:
        return iter(list(self._cookies.values()))

    def __len__(self) -> int:
        return len(self._cookies)
