"""
Base HTTP Response.

``HttpResponse`` buffers the status code, headers and body of a reply and
renders them into a ``starlette.responses.Response`` once it is sent. It is
the primitive ``icingaweb.web.response.Response`` builds upon.

Header semantics:
- Names are normalized (``x-icinga-redirect`` -> ``X-Icinga-Redirect``).
- ``set_header(..., replace=False)`` appends, so a name may occur more than once.
- After ``send_headers()`` any header or status change raises
  ``HeadersAlreadySentError`` unless ``headers_sent_throws_exception`` is off,
  in which case the change is silently dropped.
"""

from __future__ import annotations

import re
from typing import Optional

from starlette.responses import Response as StarletteResponse

from icingaweb.core.logging_config import get_logger

from .errors import HeadersAlreadySentError, InvalidStatusCodeError

logger = get_logger(__name__)

DEFAULT_BODY_SEGMENT = "default"


def normalize_header_name(name: str) -> str:
    """Normalize a header name to dash separated title case."""
    words = re.split(r"[-_\s]+", str(name).strip())
    return "-".join(word[:1].upper() + word[1:].lower() for word in words if word)


class HttpResponse:
    """HTTP response which buffers everything until it is sent."""

    def __init__(self) -> None:
        self._headers: list[dict] = []
        self._headers_raw: list[str] = []
        self._http_response_code: int = 200
        self._is_redirect: bool = False
        self._body: dict[str, str] = {}
        self._headers_sent: bool = False
        self.headers_sent_throws_exception: bool = True

    # ------------------------------------------------------------------
    # Sending state
    # ------------------------------------------------------------------

    @property
    def headers_sent(self) -> bool:
        return self._headers_sent

    def can_send_headers(self, throw: bool = False) -> bool:
        """Return whether headers may still be changed or sent.

        Raises:
            HeadersAlreadySentError: headers were sent, ``throw`` is set and
                ``headers_sent_throws_exception`` is enabled
        """
        if self._headers_sent and throw and self.headers_sent_throws_exception:
            raise HeadersAlreadySentError()
        return not self._headers_sent

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def set_header(self, name: str, value, replace: bool = False) -> "HttpResponse":
        if not self.can_send_headers(True):
            return self
        name = normalize_header_name(name)
        if replace:
            self._remove_header(name)
        self._headers.append({"name": name, "value": str(value), "replace": replace})
        return self

    def get_headers(self) -> list[dict]:
        return [dict(header) for header in self._headers]

    def get_header(self, name: str) -> Optional[str]:
        """Return the last value set for the given header, if any."""
        name = normalize_header_name(name)
        for header in reversed(self._headers):
            if header["name"] == name:
                return header["value"]
        return None

    def has_header(self, name: str) -> bool:
        return self.get_header(name) is not None

    def clear_header(self, name: str) -> "HttpResponse":
        if not self.can_send_headers(True):
            return self
        self._remove_header(normalize_header_name(name))
        return self

    def clear_headers(self) -> "HttpResponse":
        if not self.can_send_headers(True):
            return self
        self._headers = []
        return self

    def set_raw_header(self, value: str) -> "HttpResponse":
        """Add a complete ``Name: value`` header line."""
        if not self.can_send_headers(True):
            return self
        if ":" not in value:
            raise ValueError(f"Raw header must be of the form 'Name: value', got {value!r}")
        self._headers_raw.append(value)
        return self

    def get_raw_headers(self) -> list[str]:
        return list(self._headers_raw)

    def clear_raw_headers(self) -> "HttpResponse":
        if not self.can_send_headers(True):
            return self
        self._headers_raw = []
        return self

    def clear_all_headers(self) -> "HttpResponse":
        return self.clear_headers().clear_raw_headers()

    def _remove_header(self, name: str) -> None:
        self._headers = [header for header in self._headers if header["name"] != name]

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def set_redirect(self, url: str, code: int = 302) -> "HttpResponse":
        if not self.can_send_headers(True):
            return self
        self.set_header("Location", url, True)
        self.set_http_response_code(code)
        return self

    def is_redirect(self) -> bool:
        return self._is_redirect

    def set_http_response_code(self, code: int) -> "HttpResponse":
        if isinstance(code, bool) or not isinstance(code, int) or not 100 <= code <= 599:
            raise InvalidStatusCodeError(code)
        if not self.can_send_headers(True):
            return self
        self._is_redirect = 300 <= code <= 307
        self._http_response_code = code
        return self

    def get_http_response_code(self) -> int:
        return self._http_response_code

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def set_body(self, content: str, name: Optional[str] = None) -> "HttpResponse":
        """Set the body; without a segment name, all segments are replaced."""
        if name is None:
            self._body = {DEFAULT_BODY_SEGMENT: str(content)}
        else:
            self._body[name] = str(content)
        return self

    def append_body(self, content: str, name: Optional[str] = None) -> "HttpResponse":
        name = name or DEFAULT_BODY_SEGMENT
        self._body[name] = self._body.get(name, "") + str(content)
        return self

    def prepend_body(self, content: str, name: Optional[str] = None) -> "HttpResponse":
        """Insert ``content`` as the first segment (or in front of an existing segment)."""
        name = name or DEFAULT_BODY_SEGMENT
        if name in self._body:
            self._body[name] = str(content) + self._body[name]
        else:
            self._body = {name: str(content), **self._body}
        return self

    def get_body(self, name: Optional[str] = None) -> Optional[str]:
        if name is not None:
            return self._body.get(name)
        return "".join(self._body.values())

    def clear_body(self, name: Optional[str] = None) -> "HttpResponse":
        if name is None:
            self._body = {}
        else:
            self._body.pop(name, None)
        return self

    def output_body(self) -> str:
        """Return the content written to the client."""
        return self.get_body()

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def send_headers(self) -> "HttpResponse":
        """Finalize status and headers; later changes are rejected."""
        if not self.can_send_headers(True):
            return self
        self._headers_sent = True
        logger.debug(f"Headers sent with status {self._http_response_code}")
        return self

    def send_response(self) -> StarletteResponse:
        """Send headers if not done yet and render the reply."""
        if not self._headers_sent:
            self.send_headers()
        return self.render()

    def render(self) -> StarletteResponse:
        """Build the Starlette response carrying status, headers and body."""
        response = StarletteResponse(content=self.output_body(), status_code=self._http_response_code)
        for header in self._headers:
            response.headers.append(header["name"], header["value"])
        for line in self._headers_raw:
            name, value = line.split(":", 1)
            response.headers.append(name.strip(), value.strip())
        return response
