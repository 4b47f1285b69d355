"""
icingaweb Server Package.

This package contains the web server wiring for icingaweb: the FastAPI
application, its middleware, dependencies, exception handlers and configuration.

Subpackages:
    api: FastAPI route definitions.
    core: Configuration.
    exception_handlers: Redirect-and-exit and global error handling.
    middleware: Per-request web context (request, session).
    services: FastAPI dependencies.
"""
