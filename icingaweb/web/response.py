"""
Web UI Response.

``Response`` extends ``HttpResponse`` with what the web UI needs on top of a
plain HTTP reply:

- a batch of cookies sent along with the headers (except for API requests),
- redirects that work for both full-page and XHR navigation,
- instruction headers for the client side script (rerender the layout, reload
  CSS, auto-refresh interval),
- ``redirect_and_exit()``, which persists the session, sends the headers and
  leaves the request handler immediately.

On XHR requests a redirect is not answered with ``302``. Browsers would follow
it transparently and the script would render the target into the wrong
container. Instead ``X-Icinga-Redirect`` carries the percent-encoded target.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union
from urllib.parse import quote

from starlette.responses import Response as StarletteResponse

from icingaweb.core.logging_config import get_logger

from .context import get_current_request
from .cookie import Cookie, CookieSet
from .http_response import HttpResponse
from .request import Request
from .session import Session
from .url import Url

if TYPE_CHECKING:
    from .json_response import JsonResponse

logger = get_logger(__name__)

HEADER_REDIRECT = "X-Icinga-Redirect"
HEADER_RERENDER_LAYOUT = "X-Icinga-Rerender-Layout"
HEADER_CONTAINER = "X-Icinga-Container"
HEADER_RELOAD_CSS = "X-Icinga-Reload-Css"
HEADER_REFRESH = "X-Icinga-Refresh"


class RedirectAndExit(Exception):
    """Raised by :meth:`Response.redirect_and_exit` to leave the request handler.

    The ``redirect_and_exit_handler`` exception handler turns it into the
    already prepared reply.
    """

    def __init__(self, response: "Response") -> None:
        super().__init__("Redirect and exit")
        self.response = response


class Response(HttpResponse):
    """HTTP response of the web UI."""

    content_type_default = "text/html"

    def __init__(self, request: Optional[Request] = None) -> None:
        super().__init__()
        self._request = request
        self._auto_refresh_interval: Optional[int] = None
        self._cookies: Optional[CookieSet] = None
        self._redirect_url: Optional[Url] = None
        self._reload_css: Optional[bool] = None
        self._rerender_layout = False
        self._content_type = self.content_type_default
        self._cookies_to_send: list[Cookie] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_auto_refresh_interval(self) -> Optional[int]:
        return self._auto_refresh_interval

    def set_auto_refresh_interval(self, interval: Optional[int]) -> "Response":
        self._auto_refresh_interval = interval
        return self

    def get_cookies(self) -> CookieSet:
        """Get the set of cookies which are to be sent to the client."""
        if self._cookies is None:
            self._cookies = CookieSet()
        return self._cookies

    def get_cookie(self, name: str) -> Optional[Cookie]:
        return self.get_cookies().get(name)

    def set_cookie(self, cookie: Cookie) -> "Response":
        self.get_cookies().add(cookie)
        return self

    def _get_redirect_url(self) -> Optional[Url]:
        return self._redirect_url

    def _set_redirect_url(self, url: Union[str, Url]) -> "Response":
        """Remember the redirect target; :meth:`prepare` emits the matching headers."""
        if not isinstance(url, Url):
            url = Url.from_path(str(url), request=self._request)
        elif url.get_request() is None and not url.is_external():
            url.set_request(self.get_request())
        url.get_params().set_separator("&")
        self._redirect_url = url
        return self

    def get_request(self) -> Request:
        """The request this response answers; falls back to the current request."""
        if self._request is None:
            self._request = get_current_request()
        return self._request

    def is_reload_css(self) -> Optional[bool]:
        return self._reload_css

    def set_reload_css(self, reload_css: bool) -> "Response":
        self._reload_css = reload_css
        return self

    def get_rerender_layout(self) -> bool:
        return self._rerender_layout

    def set_rerender_layout(self, rerender_layout: bool = True) -> "Response":
        self._rerender_layout = bool(rerender_layout)
        return self

    def get_content_type(self) -> str:
        return self._content_type

    def set_content_type(self, content_type: str) -> "Response":
        self._content_type = content_type
        return self

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def json(self) -> "JsonResponse":
        """Entry point for HTTP responses in JSON format."""
        from .json_response import JsonResponse

        response = JsonResponse(request=self._request)
        response._copy_meta_data_from(self)
        return response

    def _copy_meta_data_from(self, response: "Response") -> "Response":
        """Copy the non-body-related data of ``response``."""
        self._headers = [dict(header) for header in response._headers]
        self._headers_raw = list(response._headers_raw)
        self._http_response_code = response._http_response_code
        self._is_redirect = response._is_redirect
        self.headers_sent_throws_exception = response.headers_sent_throws_exception
        return self

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def prepare(self) -> None:
        """Translate the response state into headers for the request type."""
        redirect_url = self._get_redirect_url()
        if self.get_request().is_xml_http_request():
            if redirect_url is not None:
                self.set_header(HEADER_REDIRECT, quote(redirect_url.get_absolute_url(), safe="-_.~"), True)
                if self.get_rerender_layout():
                    self.set_header(HEADER_RERENDER_LAYOUT, "yes", True)
            if self.get_rerender_layout():
                self.set_header(HEADER_CONTAINER, "layout", True)
            if self.is_reload_css():
                self.set_header(HEADER_RELOAD_CSS, "now", True)
            auto_refresh_interval = self.get_auto_refresh_interval()
            if auto_refresh_interval is not None:
                self.set_header(HEADER_REFRESH, auto_refresh_interval, True)
        elif redirect_url is not None:
            self.set_redirect(redirect_url.get_absolute_url())

        if not self.has_header("Content-Type"):
            self.set_header("Content-Type", self.get_content_type())

    def redirect_and_exit(self, url: Union[str, Url]) -> None:
        """Redirect to the given URL and leave the request handler immediately.

        Raises:
            RedirectAndExit: always; handled by ``redirect_and_exit_handler``
        """
        self._set_redirect_url(url)

        session = Session.get_session()
        if session.has_changed():
            session.write()

        self.send_headers()
        logger.info(f"Redirecting to {self._redirect_url.get_absolute_url()}")
        raise RedirectAndExit(self)

    def send_cookies(self) -> None:
        """Queue every cookie of the set for transmission to the client.

        Path and secure flag left unset are taken from the request.
        """
        request = self.get_request()
        self._cookies_to_send = [cookie.apply_request_defaults(request) for cookie in self.get_cookies()]

    def send_headers(self) -> "Response":
        if not self.can_send_headers(True):
            return self
        self.prepare()
        if not self.get_request().is_api_request():
            self.send_cookies()
        super().send_headers()
        return self

    def render(self) -> StarletteResponse:
        response = super().render()
        for cookie in self._cookies_to_send:
            cookie.send(response)
        return response
