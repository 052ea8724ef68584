"""Service-level API routes."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "seriesarr",
        "clients": request.app.state.broadcaster.subscriber_count,
    }
