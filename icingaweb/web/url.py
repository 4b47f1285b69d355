"""
URLs.

``Url`` represents either an application URL (a path relative to the base
path the UI is mounted under) or an external URL. Query parameters live in an
ordered, multi-valued ``UrlParams`` container which also knows the separator
used when rendering them.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Optional, Union
from urllib.parse import parse_qsl, quote, unquote_plus, urlsplit

from .context import find_current_request
from .request import Request

ParamValue = Union[str, int, float, bool, None]
ParamsInput = Union["UrlParams", Mapping[str, ParamValue], Iterable[tuple[str, ParamValue]], None]


def raw_url_encode(value: str) -> str:
    """Percent-encode everything except unreserved characters (RFC 3986)."""
    return quote(str(value), safe="-_.~")


class UrlParams:
    """Ordered query parameters; a key may occur more than once.

    A value of ``None`` or ``True`` renders the key alone (``?showCompact``).
    """

    DEFAULT_SEPARATOR = "&"

    def __init__(self, params: ParamsInput = None) -> None:
        self._params: list[tuple[str, ParamValue]] = []
        self._separator = self.DEFAULT_SEPARATOR
        if params is not None:
            self.merge(params)

    @classmethod
    def from_query_string(cls, query: str) -> "UrlParams":
        """Parse ``query``; a key without ``=`` keeps the value ``None``."""
        params = cls()
        for part in query.split("&"):
            if not part:
                continue
            if "=" not in part:
                params.add(unquote_plus(part), None)
                continue
            for key, value in parse_qsl(part, keep_blank_values=True):
                params.add(key, value)
        return params

    def get_separator(self) -> str:
        return self._separator

    def set_separator(self, separator: str) -> "UrlParams":
        self._separator = separator
        return self

    def add(self, key: str, value: ParamValue = None) -> "UrlParams":
        self._params.append((key, value))
        return self

    def set(self, key: str, value: ParamValue = None) -> "UrlParams":
        """Replace all values of ``key`` with a single one, keeping its position."""
        for index, (name, _) in enumerate(self._params):
            if name == key:
                self._params[index] = (key, value)
                self._params = self._params[: index + 1] + [p for p in self._params[index + 1 :] if p[0] != key]
                return self
        return self.add(key, value)

    def get(self, key: str, default: ParamValue = None) -> ParamValue:
        """Return the last value of ``key``."""
        for name, value in reversed(self._params):
            if name == key:
                return value
        return default

    def get_values(self, key: str) -> list[ParamValue]:
        return [value for name, value in self._params if name == key]

    def has(self, key: str) -> bool:
        return any(name == key for name, _ in self._params)

    def remove(self, *keys: str) -> "UrlParams":
        self._params = [p for p in self._params if p[0] not in keys]
        return self

    def merge(self, params: ParamsInput) -> "UrlParams":
        if isinstance(params, UrlParams):
            items = list(params)
        elif isinstance(params, Mapping):
            items = list(params.items())
        else:
            items = list(params or [])
        for key, value in items:
            self.set(key, value)
        return self

    def is_empty(self) -> bool:
        return not self._params

    def to_string(self, separator: Optional[str] = None) -> str:
        separator = self._separator if separator is None else separator
        parts = []
        for key, value in self._params:
            if value is None or value is True:
                parts.append(raw_url_encode(key))
            else:
                parts.append(f"{raw_url_encode(key)}={raw_url_encode(value)}")
        return separator.join(parts)

    def __iter__(self) -> Iterator[tuple[str, ParamValue]]:
        return iter(list(self._params))

    def __len__(self) -> int:
        return len(self._params)

    def __str__(self) -> str:
        return self.to_string()


class Url:
    """An application or external URL."""

    def __init__(
        self,
        path: str = "",
        params: ParamsInput = None,
        anchor: Optional[str] = None,
        request: Optional[Request] = None,
        base_path: Optional[str] = None,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ) -> None:
        self._path = path
        self._params = params if isinstance(params, UrlParams) else UrlParams(params)
        self._anchor = anchor
        self._request = request
        self._base_path = base_path
        self._scheme = scheme
        self._host = host

    @classmethod
    def from_path(cls, path: str, params: ParamsInput = None, request: Optional[Request] = None) -> "Url":
        """Create a Url from a path which may carry a query string and fragment.

        Paths with a host are external. Application paths lose the request's
        base path prefix and their leading slash.
        """
        if request is None:
            request = find_current_request()
        parts = urlsplit(str(path))
        url_params = UrlParams.from_query_string(parts.query)
        if params is not None:
            url_params.merge(params)
        anchor = parts.fragment or None

        if parts.netloc:
            return cls(
                parts.path,
                url_params,
                anchor,
                request=request,
                scheme=parts.scheme or (request.get_scheme() if request else "http"),
                host=parts.netloc,
            )

        relative = parts.path
        base_path = request.get_base_path() if request is not None else ""
        if base_path and (relative == base_path or relative.startswith(base_path + "/")):
            relative = relative[len(base_path) :]
        return cls(relative.lstrip("/"), url_params, anchor, request=request)

    def is_external(self) -> bool:
        return self._host is not None

    def get_path(self) -> str:
        return self._path

    def set_path(self, path: str) -> "Url":
        self._path = path
        return self

    def get_params(self) -> UrlParams:
        return self._params

    def get_anchor(self) -> Optional[str]:
        return self._anchor

    def set_anchor(self, anchor: Optional[str]) -> "Url":
        self._anchor = anchor
        return self

    def get_request(self) -> Optional[Request]:
        return self._request

    def set_request(self, request: Optional[Request]) -> "Url":
        """Bind the request the absolute URL takes scheme, host and base path from."""
        self._request = request
        return self

    def get_base_path(self) -> str:
        if self._base_path is not None:
            return self._base_path.rstrip("/")
        if self._request is not None:
            return self._request.get_base_path()
        return ""

    def _query_and_anchor(self, separator: Optional[str]) -> str:
        suffix = ""
        if not self._params.is_empty():
            suffix += "?" + self._params.to_string(separator)
        if self._anchor:
            suffix += "#" + self._anchor
        return suffix

    def get_relative_url(self, separator: Optional[str] = None) -> str:
        """Path below the base path, with query string and anchor."""
        return self._path + self._query_and_anchor(separator)

    def get_absolute_url(self, separator: Optional[str] = None) -> str:
        if self.is_external():
            path = self._path if not self._path or self._path.startswith("/") else "/" + self._path
            return f"{self._scheme}://{self._host}{path}{self._query_and_anchor(separator)}"

        prefix = self.get_base_path() + "/" + self.get_relative_url(separator)
        if self._request is None:
            return prefix
        return f"{self._request.get_scheme()}://{self._request.get_host()}{prefix}"

    def __str__(self) -> str:
        return self.get_absolute_url()

    def __repr__(self) -> str:
        return f"Url({self.get_absolute_url()!r})"
