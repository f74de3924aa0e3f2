"""FastAPI dependency wiring for directory services.

The services themselves are built once during the application lifespan and
stored on ``app.state``; these factories only look them up so routers stay
free of construction details and tests can override them.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from country_directory.services.detail_service import CountryDetailService
from country_directory.services.directory_service import DirectoryService


def _require_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Country directory is still starting up",
        )
    return service


def get_directory_service(request: Request) -> DirectoryService:
    """Provide the process-wide :class:`DirectoryService`."""

    return _require_state(request, "directory_service")


def get_detail_service(request: Request) -> CountryDetailService:
    return _require_state(request, "detail_service")


__all__ = ["get_detail_service", "get_directory_service"]
