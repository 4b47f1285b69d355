"""
Server-side Sessions.

A ``Session`` is identified by the id stored in the session cookie and keeps
its data in a ``SessionStore``. Data is grouped in namespaces; the session
tracks whether anything changed so that it only has to be written back when
needed (see ``Response.redirect_and_exit`` and ``WebContextMiddleware``).
"""

from __future__ import annotations

import secrets
import time
from abc import ABC, abstractmethod
from copy import deepcopy
from typing import Any, Iterator, Optional

from icingaweb.core.logging_config import get_logger

from .context import get_current_session

logger = get_logger(__name__)

DEFAULT_NAMESPACE = "__default__"


def generate_session_id() -> str:
    return secrets.token_urlsafe(32)


class SessionStore(ABC):
    """Persistence backend for session data."""

    @abstractmethod
    def load(self, session_id: str) -> Optional[dict[str, dict[str, Any]]]:
        """Return the stored namespaces of a session, ``None`` if unknown or expired."""

    @abstractmethod
    def save(self, session_id: str, data: dict[str, dict[str, Any]]) -> None:
        """Store the namespaces of a session."""

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Forget a session."""


class InMemorySessionStore(SessionStore):
    """Process-local store; entries expire ``lifetime`` seconds after their last save."""

    def __init__(self, lifetime: int = 1440) -> None:
        self.lifetime = lifetime
        self._entries: dict[str, tuple[float, dict[str, dict[str, Any]]]] = {}

    def load(self, session_id: str) -> Optional[dict[str, dict[str, Any]]]:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        saved_at, data = entry
        if time.monotonic() - saved_at > self.lifetime:
            logger.debug(f"Session {session_id[:8]}... expired")
            del self._entries[session_id]
            return None
        return deepcopy(data)

    def save(self, session_id: str, data: dict[str, dict[str, Any]]) -> None:
        now = time.monotonic()
        self._sweep(now)
        self._entries[session_id] = (now, deepcopy(data))

    def delete(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def _sweep(self, now: float) -> None:
        """Drop every expired entry."""
        expired = [sid for sid, (saved_at, _) in self._entries.items() if now - saved_at > self.lifetime]
        for session_id in expired:
            del self._entries[session_id]
        if expired:
            logger.debug(f"Swept {len(expired)} expired session(s)")

    def __len__(self) -> int:
        return len(self._entries)


class SessionNamespace:
    """A named bag of session values."""

    def __init__(self, values: Optional[dict[str, Any]] = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self._changed = False

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> "SessionNamespace":
        self._values[key] = value
        self._changed = True
        return self

    def delete(self, key: str) -> "SessionNamespace":
        if key in self._values:
            del self._values[key]
            self._changed = True
        return self

    def clear(self) -> "SessionNamespace":
        if self._values:
            self._values = {}
            self._changed = True
        return self

    def has_changed(self) -> bool:
        return self._changed

    def mark_clean(self) -> None:
        self._changed = False

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))


class Session:
    """The session of the current client."""

    def __init__(self, store: SessionStore, session_id: Optional[str] = None) -> None:
        self._store = store
        self._namespaces: dict[str, SessionNamespace] = {}
        self._is_new = True
        self._changed = False
        self._id = session_id or generate_session_id()
        if session_id is not None:
            self.read()

    @classmethod
    def get_session(cls) -> "Session":
        """Return the session bound to the current request."""
        return get_current_session()

    def get_id(self) -> str:
        return self._id

    def is_new(self) -> bool:
        """Whether the client does not know this session id yet."""
        return self._is_new

    def exists(self) -> bool:
        return self._store.load(self._id) is not None

    def read(self) -> "Session":
        data = self._store.load(self._id)
        if data is None:
            logger.debug("Unknown session id presented, starting a new session")
            self._id = generate_session_id()
            self._is_new = True
            self._namespaces = {}
        else:
            self._is_new = False
            self._namespaces = {name: SessionNamespace(values) for name, values in data.items()}
        self._changed = False
        return self

    def write(self) -> "Session":
        """Persist all namespaces and reset the changed state."""
        data = {name: namespace.to_dict() for name, namespace in self._namespaces.items()}
        self._store.save(self._id, data)
        for namespace in self._namespaces.values():
            namespace.mark_clean()
        self._changed = False
        logger.debug(f"Session {self._id[:8]}... written")
        return self

    def has_changed(self) -> bool:
        return self._changed or any(namespace.has_changed() for namespace in self._namespaces.values())

    def get_namespace(self, name: str) -> SessionNamespace:
        if name not in self._namespaces:
            self._namespaces[name] = SessionNamespace()
        return self._namespaces[name]

    def has_namespace(self, name: str) -> bool:
        return name in self._namespaces

    def remove_namespace(self, name: str) -> "Session":
        if self._namespaces.pop(name, None) is not None:
            self._changed = True
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self.get_namespace(DEFAULT_NAMESPACE).get(key, default)

    def set(self, key: str, value: Any) -> "Session":
        self.get_namespace(DEFAULT_NAMESPACE).set(key, value)
        return self

    def delete(self, key: str) -> "Session":
        self.get_namespace(DEFAULT_NAMESPACE).delete(key)
        return self

    def clear(self) -> "Session":
        if self._namespaces:
            self._namespaces = {}
            self._changed = True
        return self

    def refresh_id(self) -> "Session":
        """Move the session data to a new id."""
        self._store.delete(self._id)
        self._id = generate_session_id()
        self._is_new = True
        self._changed = True
        return self

    def purge(self) -> "Session":
        """Destroy the stored session and start over empty."""
        self._store.delete(self._id)
        self._namespaces = {}
        self._id = generate_session_id()
        self._is_new = True
        self._changed = False
        return self
