"""Series REST resource."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from app.api.dependencies import get_orchestrator, parse_bool_query
from app.models.resources import SeriesResource
from app.services.orchestrator import SeriesOrchestrator

router = APIRouter(tags=["Series"])


@router.get(
    "/series",
    response_model=List[SeriesResource],
    response_model_exclude_none=True,
)
async def list_series(
    include_season_images: str | None = Query(None, alias="includeSeasonImages"),
    orchestrator: SeriesOrchestrator = Depends(get_orchestrator),
):
    """List every series with statistics, local covers and alternate titles."""
    return await orchestrator.list_series(parse_bool_query(include_season_images))


@router.get(
    "/series/{series_id}",
    response_model=SeriesResource,
    response_model_exclude_none=True,
)
async def get_series(
    series_id: int,
    include_season_images: str | None = Query(None, alias="includeSeasonImages"),
    orchestrator: SeriesOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_series(
        series_id, parse_bool_query(include_season_images)
    )


@router.post("/series", status_code=201)
async def create_series(
    resource: SeriesResource,
    orchestrator: SeriesOrchestrator = Depends(get_orchestrator),
):
    """Add a series. Returns the id assigned to it."""
    series_id = await orchestrator.create_series(resource)
    return {"id": series_id}


@router.put("/series", status_code=202)
async def update_series(
    resource: SeriesResource,
    orchestrator: SeriesOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.update_series(resource)
    return Response(status_code=202)


@router.put("/series/{series_id}", status_code=202)
async def update_series_by_id(
    series_id: int,
    resource: SeriesResource,
    orchestrator: SeriesOrchestrator = Depends(get_orchestrator),
):
    """Same as ``PUT /series`` with the id taken from the URL."""
    resource.id = series_id
    await orchestrator.update_series(resource)
    return Response(status_code=202)


@router.delete("/series/{series_id}")
async def delete_series(
    series_id: int,
    delete_files: str | None = Query(None, alias="deleteFiles"),
    orchestrator: SeriesOrchestrator = Depends(get_orchestrator),
):
    """Remove a series; its files are only deleted with ``deleteFiles=true``."""
    await orchestrator.delete_series(series_id, parse_bool_query(delete_files))
    return {}
