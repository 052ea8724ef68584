import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes_api import router as api_router
from app.api.routes_series import router as series_router
from app.api.routes_stream import router as stream_router
from app.collaborators.covers import LocalCoverMapper
from app.collaborators.memory import (
    InMemorySceneMappingProvider,
    InMemoryStatisticsProvider,
)
from app.collaborators.profiles import StaticProfileDirectory
from app.collaborators.sql_store import SqlSeriesStore
from app.core.auth import ApiAuthMiddleware
from app.core.config import get_settings
from app.core.database import create_db_and_tables, engine
from app.core.errors import (
    CollaboratorUnavailableError,
    SeriesNotFoundError,
    ValidationFailedError,
)
from app.services.aggregator import ResourceAggregator
from app.services.broadcast import ChangeBroadcaster
from app.services.events import EventHub, event_hub_lifespan
from app.services.orchestrator import SeriesOrchestrator
from app.validation.series_rules import build_series_pipeline

load_dotenv()

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Services
broadcaster = ChangeBroadcaster(timeout=settings.broadcast_timeout)
event_hub = EventHub(broadcaster)
store = SqlSeriesStore(engine, event_hub)
statistics = InMemoryStatisticsProvider()
scene_mappings = InMemorySceneMappingProvider()
quality_profiles = StaticProfileDirectory(settings.quality_profiles)
language_profiles = StaticProfileDirectory(settings.language_profiles)

orchestrator = SeriesOrchestrator(
    store=store,
    validator=build_series_pipeline(
        store, quality_profiles, language_profiles, settings.root_folders
    ),
    aggregator=ResourceAggregator(
        statistics=statistics,
        cover_mapper=LocalCoverMapper(settings.media_cover_dir, settings.url_base),
        alternate_titles=scene_mappings,
    ),
    language_profiles=language_profiles,
    broadcaster=broadcaster,
)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    create_db_and_tables()
    async with event_hub_lifespan(event_hub):
        yield


app = FastAPI(
    title="Seriesarr",
    description="Series library API with live change notifications",
    version="0.1.0",
    lifespan=app_lifespan,
)
app.state.orchestrator = orchestrator
app.state.broadcaster = broadcaster
app.state.event_hub = event_hub

app.add_middleware(ApiAuthMiddleware)


@app.exception_handler(ValidationFailedError)
async def validation_failed_handler(request: Request, exc: ValidationFailedError):
    return JSONResponse(
        status_code=400, content=[f.to_json() for f in exc.failures]
    )


@app.exception_handler(SeriesNotFoundError)
async def not_found_handler(request: Request, exc: SeriesNotFoundError):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(CollaboratorUnavailableError)
async def collaborator_unavailable_handler(
    request: Request, exc: CollaboratorUnavailableError
):
    logger.error(f"{exc} ({request.method} {request.url.path})")
    return JSONResponse(status_code=503, content={"message": str(exc)})


# Include routers
app.include_router(api_router, prefix="/api")
app.include_router(series_router, prefix="/api")
app.include_router(stream_router, prefix="/api")
