"""
Record API Schemas - Response models for record and health endpoints

Records themselves are open-ended mappings, so they travel as plain dicts;
only the surrounding envelopes are typed.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class RepositoryStatus(BaseModel):
    """Load state of one record repository"""

    status: str = Field(..., description="empty, loaded, corrupt or not_loaded")
    count: int = Field(..., description="Records currently held in memory")
    error: Optional[str] = Field(None, description="Load error when the store is corrupt")


class HealthResponse(BaseModel):
    """Readiness report across all repositories"""

    ready: bool = Field(..., description="True when every store loaded cleanly")
    repositories: Dict[str, RepositoryStatus] = Field(..., description="Status per resource")


class ConflictResponse(BaseModel):
    """Returned when a record's key value is already taken"""

    detail: str = Field(..., description="Human-readable message")
    field: Optional[str] = Field(None, description="Key field in conflict")
    record: Optional[Dict[str, Any]] = Field(None, description="The rejected candidate")
