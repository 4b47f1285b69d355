from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import APIRouter, FastAPI
from httpx import ASGITransport, AsyncClient

from icingaweb.server.services.deps import SessionDep, WebResponseDep
from icingaweb.web.cookie import Cookie
from icingaweb.web.session import InMemorySessionStore


def build_test_router() -> APIRouter:
    """Routes exercising the web layer the way UI controllers do."""
    router = APIRouter(prefix="/test")

    @router.get("/redirect")
    async def redirect(response: WebResponseDep, rerender: bool = False):
        response.set_rerender_layout(rerender)
        response.redirect_and_exit("dashboard?pane=overview")

    @router.get("/page")
    async def page(response: WebResponseDep):
        response.set_cookie(Cookie("icingaweb2-tzo", "3600-0"))
        response.set_auto_refresh_interval(10).set_reload_css(True)
        response.set_body("<div>page</div>")
        return response.send_response()

    @router.post("/login")
    async def login(response: WebResponseDep, session: SessionDep, user: str = "icingaadmin"):
        session.set("user", user)
        response.redirect_and_exit("dashboard")

    @router.get("/whoami")
    async def whoami(response: WebResponseDep, session: SessionDep):
        return response.json().set_success_data({"user": session.get("user")}).send_response()

    @router.get("/touch")
    async def touch(session: SessionDep):
        session.get_namespace("visits").set("count", session.get_namespace("visits").get("count", 0) + 1)
        return {"count": session.get_namespace("visits").get("count")}

    @router.get("/boom")
    async def boom():
        raise RuntimeError("kaputt")

    return router


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore(lifetime=60)


@pytest.fixture
def app(session_store: InMemorySessionStore) -> FastAPI:
    from icingaweb.server.main import create_app

    application = create_app(session_store=session_store)
    application.include_router(build_test_router())
    return application


@pytest_asyncio.fixture(name="client")
async def client_fixture(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client talking to the app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False), base_url="http://localhost"
    ) as client:
        yield client
