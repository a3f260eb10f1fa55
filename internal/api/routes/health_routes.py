"""
Health Check API Routes.
"""

from fastapi import APIRouter, Depends

from core import get_settings
from core.dependencies import get_artifact_store_dependency, resolve_executable
from core.errors import StoreIOError
from interfaces.artifact_store import IArtifactStore
from internal.api.utils import success_response
from models.schemas import HealthResponse, StandardResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/",
    response_model=StandardResponse,
    summary="Root Endpoint",
    description="Get basic API information",
    operation_id="get_root",
)
async def root():
    """Service name, version and status."""
    settings = get_settings()
    return success_response(
        message="API service is running",
        data={
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        },
    )


@router.get(
    "/health",
    response_model=StandardResponse,
    summary="Health Check",
    description="Check store readability, usage against budget and downloader presence",
    operation_id="health_check",
)
def health_check(store: IArtifactStore = Depends(get_artifact_store_dependency)):
    """
    Health check endpoint.

    The service is healthy when the store directory can be scanned. Scanning
    walks the whole directory, so this runs in the threadpool.
    """
    settings = get_settings()
    downloader_available = resolve_executable(settings.exec_path) is not None

    try:
        stats = store.stats(settings.budget_bytes)
        status, message, error = "healthy", "Service is healthy", None
    except StoreIOError as e:
        stats = None
        status, message, error = "unhealthy", "Service unhealthy: store unreadable", str(e)

    health = HealthResponse(
        status=status,
        service=settings.app_name,
        version=settings.app_version,
        store=stats,
        downloader_available=downloader_available,
    ).model_dump()
    if error:
        health["error"] = error

    return success_response(message=message, data=health)
