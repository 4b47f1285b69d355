"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from icingaweb.server.services.deps import WebResponseDep

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the web server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the web server.",
    response_description="JSend envelope with version object.",
)
async def version(response: WebResponseDep):
    """
    Get version.

    Answers through the web layer's JSON response, so the reply is a JSend
    envelope: ``{"status": "success", "data": {...}}``.
    """
    return response.json().set_success_data({"version": "0.1.0"}).send_response()
