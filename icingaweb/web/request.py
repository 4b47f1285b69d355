"""
Request Wrapper.

Thin wrapper around ``starlette.requests.Request`` answering the questions the
response layer asks: is this an XHR call, is this an API call, is the
connection secure and which base path is the UI mounted under.
"""

from __future__ import annotations

from typing import Optional

from starlette.requests import Request as StarletteRequest

XHR_HEADER_VALUE = "XMLHttpRequest"
API_MEDIA_TYPE = "application/json"


class Request:
    """The request a response is answering."""

    def __init__(self, request: StarletteRequest, base_path: Optional[str] = None) -> None:
        self._request = request
        self._base_path = base_path

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._request.headers.get(name, default)

    def get_cookie(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._request.cookies.get(name, default)

    def is_xml_http_request(self) -> bool:
        return self.get_header("X-Requested-With") == XHR_HEADER_VALUE

    def is_api_request(self) -> bool:
        """Whether the client asked for JSON only."""
        return self.get_header("Accept") == API_MEDIA_TYPE

    def is_secure(self) -> bool:
        return self._request.url.scheme in ("https", "wss")

    def get_scheme(self) -> str:
        return self._request.url.scheme

    def get_host(self) -> str:
        """Host and, unless it is the scheme's default, the port."""
        return self._request.url.netloc

    def get_base_path(self) -> str:
        """Path prefix of the application without trailing slash."""
        if self._base_path is None:
            self._base_path = self._request.scope.get("root_path", "")
        return self._base_path.rstrip("/")

    def get_path(self) -> str:
        return self._request.url.path
