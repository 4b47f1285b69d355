"""
Middleware modules for the icingaweb server.

This package contains custom middleware binding the per-request web context
(request, session) and logging requests.
"""

from .web_context_middleware import WebContextMiddleware

__all__ = ["WebContextMiddleware"]
