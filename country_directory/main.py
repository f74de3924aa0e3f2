import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .api import countries, directory, favorites
from .errors import StorageError
from .schemas.error import ErrorType, ValidationErrorDetail
from .services.dataset import DatasetCache
from .services.detail_service import CountryDetailService
from .services.directory_service import DirectoryService
from .services.facets import FacetIndex
from .services.favorites import FavoritesStore
from .services.provider import build_provider
from .settings import AppSettings, get_settings
from .storage import build_key_value_store
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    error_json_response,
)
from .utils.request_context import get_request_id, set_request_id
from .warmup import warmup_all

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration left at its defaults."""
    resolved = active_settings or get_settings()
    warnings = resolved.optional_config_warnings()

    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")
        logger.warning("=" * 60)


def validate_environment(active_settings: AppSettings | None = None) -> None:
    """Public wrapper ensuring CLI tools can trigger configuration validation."""

    _validate_environment(active_settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the directory services, load the dataset, and tear down storage."""
    active_settings = get_settings()
    validate_environment(active_settings)

    store = build_key_value_store(active_settings)
    provider = build_provider(active_settings)

    logger.info("=" * 60)
    logger.info("Country Directory API - Preflight")
    logger.info("=" * 60)
    logger.info(f"Provider: {getattr(provider, 'description', type(provider).__name__)}")
    logger.info(f"Favorites backend: {active_settings.favorites_backend.upper()}")
    logger.info("=" * 60)

    dataset = DatasetCache()
    facet_index = FacetIndex()
    favorites_store = FavoritesStore(store)

    await warmup_all(
        dataset=dataset,
        provider=provider,
        facet_index=facet_index,
        favorites=favorites_store,
    )

    app.state.directory_service = DirectoryService(
        dataset=dataset,
        favorites=favorites_store,
        facet_index=facet_index,
    )
    app.state.detail_service = CountryDetailService(
        provider, dataset=dataset, favorites=favorites_store
    )

    yield

    logger.info("Shutting down Country Directory API")
    app.state.directory_service = None
    app.state.detail_service = None
    close = getattr(store, "close", None)
    if callable(close):
        close()


app = FastAPI(
    title="Country Directory API",
    version="0.1.0",
    description="Searchable, filterable and paginated directory of the world's countries.",
    lifespan=lifespan,
    redirect_slashes=False,
)


def _default_origins() -> list[str]:
    ports = list(range(3000, 3011)) + [5173]
    origins = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend([f"http://{host}:{port}" for port in ports])
    origins.append("http://localhost")
    origins.append("http://127.0.0.1")
    return origins


def _combine_origins(*origin_groups: list[str]) -> list[str]:
    """Merge origins preserving order and removing duplicates."""
    seen: set[str] = set()
    combined: list[str] = []
    for group in origin_groups:
        for origin in group:
            normalized = origin.rstrip("/")
            if normalized and normalized not in seen:
                seen.add(normalized)
                combined.append(normalized)
    return combined


allow_origins = _combine_origins(_default_origins(), settings.cors_allow_origins)
logger.debug("Configured CORS allow_origins: %s", ", ".join(allow_origins))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware to add request ID to each request
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _validation_details(raw_errors) -> list[ValidationErrorDetail]:
    return [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in raw_errors
    ]


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    errors = _validation_details(exc.errors())

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors."""
    errors = _validation_details(exc.errors())

    logger.warning(
        "Pydantic validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Data validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    """Handle failures of the favorites key-value store."""
    logger.error(
        "Storage error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    return error_json_response(
        build_error_response(
            error_type=ErrorType.STORAGE_ERROR,
            message="Favorites storage unavailable",
            detail=f"The {exc.backend} store could not be reached. Please try again.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            path=str(request.url.path),
            retry_after=5,
        )
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )

    error_response = build_error_response(
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
        retry_after=5,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}


app.include_router(directory.router, prefix="/directory", tags=["directory"])
app.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
app.include_router(countries.router, prefix="/countries", tags=["countries"])
