"""
Health Router - Health checks and repository status endpoints
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_app_state, AppState
from api.schemas.records import HealthResponse

router = APIRouter()


@router.get("/ready", response_model=HealthResponse)
async def health_check_ready(state: AppState = Depends(get_app_state)) -> HealthResponse:
    """
    Readiness probe.

    Loads every store that has not been read yet and reports ready=True when
    none of them is corrupt.
    """
    repositories = state.get_status()

    return HealthResponse(
        ready=state.is_ready(),
        repositories=repositories
    )
