"""FastAPI dependencies resolving the services wired in ``app.main``."""

from fastapi import Request

from app.services.orchestrator import SeriesOrchestrator


def get_orchestrator(request: Request) -> SeriesOrchestrator:
    return request.app.state.orchestrator


def parse_bool_query(value: str | None, default: bool = False) -> bool:
    """Lenient boolean query parameter: anything unrecognised means ``default``."""
    if value is None:
        return default
    v = value.strip().lower()
    if v in ("true", "1"):
        return True
    if v in ("false", "0"):
        return False
    return default
