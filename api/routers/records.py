"""
Records Router - CRUD and query endpoints for one record model

build_router() is called once per registered model. Query string parameters
on the collection endpoint are passed through to Repository.get_all(), so
``GET /contacts?Name=a*&sort=Name,desc`` filters and sorts.

Handlers are coroutines that call the repository directly, so every request
touching a store runs on the event loop thread, one at a time.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from api.dependencies import repository_dependency
from api.schemas.records import ConflictResponse
from recordstore.repository import Repository, UpdateResult

logger = logging.getLogger(__name__)

UPDATE_STATUS = {
    UpdateResult.OK: status.HTTP_204_NO_CONTENT,
    UpdateResult.INVALID: status.HTTP_400_BAD_REQUEST,
    UpdateResult.CONFLICT: status.HTTP_409_CONFLICT,
    UpdateResult.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def _conflict(repo: Repository, record: Dict[str, Any]) -> JSONResponse:
    body = ConflictResponse(
        detail=f"{repo.model.key} already in use",
        field=repo.model.key,
        record=record,
    )
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())


def build_router(resource: str) -> APIRouter:
    """
    Create the router serving one resource.

    Args:
        resource: Plural resource name, e.g. "contacts"

    Returns:
        APIRouter with list, get, create, update and delete endpoints
    """
    router = APIRouter()
    get_repository = repository_dependency(resource)

    @router.get(f"/{resource}", response_model=List[Dict[str, Any]])
    async def list_records(
        request: Request,
        repo: Repository = Depends(get_repository)
    ) -> List[Dict[str, Any]]:
        """List records, filtered and sorted by query string parameters."""
        params = dict(request.query_params)
        records = repo.get_all(params or None)
        logger.info(f"GET /{resource} params={params} -> {len(records)} records")
        return records

    @router.get(f"/{resource}/{{record_id}}", response_model=Dict[str, Any])
    async def get_record(
        record_id: int,
        repo: Repository = Depends(get_repository)
    ) -> Dict[str, Any]:
        record = repo.get(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"{repo.model.type_name} {record_id} not found")
        return record

    @router.post(f"/{resource}", status_code=status.HTTP_201_CREATED)
    async def create_record(
        candidate: Dict[str, Any] = Body(...),
        repo: Repository = Depends(get_repository)
    ):
        record = repo.add(candidate)
        if record is None:
            if repo.model.valid(candidate):
                raise HTTPException(status_code=500, detail=f"Failed to store {repo.model.type_name}")
            raise HTTPException(status_code=400, detail=f"Invalid {repo.model.type_name}")
        if record.get("conflict"):
            return _conflict(repo, record)
        return record

    @router.put(f"/{resource}/{{record_id}}", status_code=status.HTTP_204_NO_CONTENT)
    async def update_record(
        record_id: int,
        candidate: Dict[str, Any] = Body(...),
        repo: Repository = Depends(get_repository)
    ) -> Response:
        if candidate.setdefault("Id", record_id) != record_id:
            raise HTTPException(status_code=400, detail="Id in body does not match Id in path")

        result = repo.update(candidate)
        logger.info(f"PUT /{resource}/{record_id} -> {result.value}")
        if result is UpdateResult.CONFLICT:
            return _conflict(repo, candidate)
        if result is not UpdateResult.OK:
            raise HTTPException(status_code=UPDATE_STATUS[result], detail=result.value)
        return Response(status_code=UPDATE_STATUS[result])

    @router.delete(f"/{resource}/{{record_id}}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_record(
        record_id: int,
        repo: Repository = Depends(get_repository)
    ) -> Response:
        if not repo.remove(record_id):
            raise HTTPException(status_code=404, detail=f"{repo.model.type_name} {record_id} not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
