"""Error types for the web layer.

Defines a small hierarchy of exceptions raised by responses, cookies and the
request/session context. ``RedirectAndExit`` lives in ``icingaweb.web.response``
because it is control flow rather than an error.
"""

from __future__ import annotations


class WebError(Exception):
    """Base error for all web layer exceptions."""


class InvalidStatusCodeError(WebError, ValueError):
    """Raised when an HTTP status code outside 100..599 is set."""

    def __init__(self, code: object) -> None:
        super().__init__(f"Invalid HTTP response code: {code!r}")
        self.code = code


class HeadersAlreadySentError(WebError):
    """Raised when headers are modified or sent after they were sent."""

    def __init__(self, action: str = "modify headers") -> None:
        super().__init__(f"Cannot {action}; headers already sent")


class InvalidCookieError(WebError, ValueError):
    """Raised for cookie names a browser would not accept."""


class NoRequestContextError(WebError, RuntimeError):
    """Raised when the current request is needed outside of a request."""

    def __init__(self) -> None:
        super().__init__("No request is bound to the current context")


class SessionNotStartedError(WebError, RuntimeError):
    """Raised when the session is accessed before the session middleware ran."""

    def __init__(self) -> None:
        super().__init__("No session is bound to the current context")
