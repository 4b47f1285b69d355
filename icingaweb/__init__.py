"""icingaweb.

HTTP response layer of a server-rendered web UI built on Starlette/FastAPI.

High-level architecture
-----------------------

The web UI talks to the server in two ways:

- **Full-page navigation**: the browser loads a page; redirects use the
  regular ``302`` + ``Location`` mechanism.
- **XHR navigation**: client-side script fetches page fragments and reads
  ``X-Icinga-*`` instruction headers (redirect, rerender the layout, reload
  CSS, auto-refresh interval) from the response.

Core subpackages
----------------

- ``icingaweb.web``:

  - ``HttpResponse``, the base response primitive (headers, status, body).
  - ``Response``, which emits the right headers for the request type, batches
    cookies and implements redirect-then-exit.
  - ``JsonResponse`` for JSend-style JSON replies.
  - Cookies, URLs, the request wrapper and the session.

- ``icingaweb.server``:

  - The FastAPI application, its middleware, dependencies and exception
    handlers.

Typical workflow
----------------

1. ``WebContextMiddleware`` binds the current request and session.
2. A route receives a ``Response`` via ``WebResponseDep``.
3. The route sets cookies, refresh intervals, etc. and returns
   ``response.send_response()``, or calls ``response.redirect_and_exit(url)``.
"""
