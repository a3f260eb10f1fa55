"""
Models Layer - Domain models and Pydantic schemas.

This layer contains:
- Domain models for the artifact store (Artifact, StoreStats)
- Pydantic schemas for JSON API responses
"""

from .schemas import (
    Artifact,
    StoreStats,
    StandardResponse,
    HealthResponse,
)

__all__ = [
    # Domain models
    "Artifact",
    "StoreStats",
    # API Response schemas
    "StandardResponse",
    "HealthResponse",
]
