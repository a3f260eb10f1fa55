"""
Pydantic Schemas - Domain models and API response DTOs.

This module consolidates all Pydantic models used across the application.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Domain Models
# =============================================================================


class Artifact(BaseModel):
    """An audio file in the store, named by its video identifier."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Video identifier, also the filename stem")
    path: Path
    size_bytes: int = Field(..., ge=0)
    modified_at: datetime = Field(..., description="File mtime, used as age")


class StoreStats(BaseModel):
    """Point-in-time snapshot of the artifact store."""

    files_dir: str
    artifact_count: int
    total_size_bytes: int
    budget_bytes: int

    @property
    def over_budget(self) -> bool:
        return self.total_size_bytes > self.budget_bytes


# =============================================================================
# Common Response Schemas
# =============================================================================


class StandardResponse(BaseModel):
    """
    Standard API response format for JSON endpoints.

    - error_code: 0 = success, 1 = error
    - message: Success or error message
    - data: Response data (optional)
    """

    error_code: int = 0
    message: str
    data: Optional[Any] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error_code": 0,
                    "message": "Service is healthy",
                    "data": {"status": "healthy"},
                },
            ]
        }
    )


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    service: str
    version: str
    store: Optional[StoreStats] = None
    downloader_available: Optional[bool] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "status": "healthy",
                    "service": "MP3 Host API",
                    "version": "1.0.0",
                    "store": {
                        "files_dir": "files",
                        "artifact_count": 3,
                        "total_size_bytes": 15728640,
                        "budget_bytes": 209715200,
                    },
                    "downloader_available": True,
                }
            ]
        }
    )
