"""
FastAPI application exposing the traffic index, commute comparison and events
"""

import logging
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trafficindex import __version__
from trafficindex.core.errors import BadRequestError, TrafficIndexError
from trafficindex.core.models import GeoPoint
from trafficindex.services import Services

logger = logging.getLogger(__name__)


def _parse_point(value: Optional[str], name: str) -> Optional[GeoPoint]:
    if not value:
        return None
    try:
        return GeoPoint.parse(value)
    except ValueError as e:
        raise BadRequestError(f"Invalid '{name}': {e}")


def _parse_radius(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        radius = float(value)
    except ValueError:
        raise BadRequestError(f"Invalid 'radiusKm': must be a number, got {value!r}")
    if not radius > 0:
        raise BadRequestError(f"Invalid 'radiusKm': must be positive, got {value!r}")
    return radius


def create_app(services: Services) -> FastAPI:
    """Build the API around already-constructed services"""
    app = FastAPI(title="TrafficIndex API", version=__version__)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(TrafficIndexError)
    async def server_fault_handler(request: Request, exc: TrafficIndexError):
        logger.error(f"{request.url.path} error: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/index")
    async def traffic_index():
        snapshot = await services.index.get_index()
        return snapshot.to_payload()

    @app.get("/api/commute")
    async def commute(
        from_: Optional[str] = Query(None, alias="from", description="Origin as lat,lng"),
        to: Optional[str] = Query(None, description="Destination as lat,lng"),
        modes: Optional[str] = Query(None, description="Comma-separated travel modes"),
    ):
        response = await services.commute.compare(from_, to, modes)
        return response.to_payload()

    @app.get("/api/events/upcoming")
    async def upcoming_events(
        near: Optional[str] = Query(None, description="Reference point as lat,lng"),
        radius_km: Optional[str] = Query(None, alias="radiusKm", description="Radius in km around near"),
    ):
        point = _parse_point(near, "near")
        radius = _parse_radius(radius_km)
        return services.events.upcoming(near=point, radius_km=radius).to_payload()

    return app
