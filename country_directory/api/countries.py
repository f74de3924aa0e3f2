"""FastAPI router serving the single-country detail view."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from country_directory.schemas.country import CountryDetail
from country_directory.schemas.error import ErrorResponse, ErrorType
from country_directory.services.dependencies import get_detail_service
from country_directory.services.detail_service import CountryDetailService
from country_directory.utils.error_responses import build_error_response, error_json_response

router = APIRouter()


@router.get(
    "/{code}",
    response_model=CountryDetail,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def get_country(
    code: str,
    request: Request,
    service: CountryDetailService = Depends(get_detail_service),
) -> CountryDetail | JSONResponse:
    """Return one country with display fallbacks and its USD exchange rate."""

    result = await service.get_detail(code)
    if not result.ok:
        return error_json_response(
            build_error_response(
                error_type=ErrorType.NETWORK_ERROR,
                message="Country provider unavailable",
                detail=result.error or "The country lookup failed",
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                path=str(request.url.path),
                retry_after=5,
            )
        )
    if result.detail is None:
        return error_json_response(
            build_error_response(
                error_type=ErrorType.NOT_FOUND,
                message="Country not found",
                detail=f"No country with code '{code}'",
                status_code=status.HTTP_404_NOT_FOUND,
                path=str(request.url.path),
            )
        )
    return result.detail
