"""FastAPI application."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from disaster_info.core.errors import DisasterInfoError, ExternalApiError, InvalidInputError
from disaster_info.core.parser import coordinate_parser
from disaster_info.core.service import DisasterInfoService
from disaster_info.utils.config import settings
from disaster_info.utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield


app = FastAPI(
    title="Disaster Info API",
    description="Hazard risk, evacuation shelters and disaster history around a point",
    version=settings.app.version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

service = DisasterInfoService()


def _error(status: int, code: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"success": False, "error": {"code": code, "message": message, **extra}},
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return _error(400, "INVALID_COORDINATES", exc.message, field=exc.field)


@app.exception_handler(ExternalApiError)
async def external_api_handler(request: Request, exc: ExternalApiError):
    logger.error(f"{request.method} {request.url.path}: {exc.api_name} - {exc.message}")
    return _error(503, exc.code, f"External API error: {exc.message}", apiName=exc.api_name)


@app.exception_handler(DisasterInfoError)
async def disaster_info_handler(request: Request, exc: DisasterInfoError):
    logger.error(f"{request.method} {request.url.path}: {exc.code} - {exc.message}")
    return _error(500, "INTERNAL_SERVER_ERROR", "Internal server error")


@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path}: unhandled error")
    return _error(500, "INTERNAL_SERVER_ERROR", "Internal server error")


def _ok(data: dict) -> dict:
    return {"success": True, "data": data}


def _envelope(coordinates, **lists) -> dict:
    return {
        "coordinates": {"latitude": coordinates.latitude, "longitude": coordinates.longitude},
        **{key: [item.to_dict() for item in items] for key, items in lists.items()},
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.app.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/disaster-info/{lat}/{lng}")
async def get_disaster_info(lat: str, lng: str):
    """Hazards, shelters, history and weather alerts for a point."""
    coordinates = coordinate_parser.parse(lat, lng)
    info = await service.get_disaster_info(coordinates)
    return _ok(info.to_dict())


@app.get("/api/disaster-info/{lat}/{lng}/hazards")
async def get_hazards(lat: str, lng: str):
    coordinates = coordinate_parser.parse(lat, lng)
    hazards = await service.get_hazard_map_info(coordinates)
    return _ok(_envelope(coordinates, hazardInfo=hazards))


@app.get("/api/disaster-info/{lat}/{lng}/shelters")
async def get_shelters(lat: str, lng: str):
    coordinates = coordinate_parser.parse(lat, lng)
    shelters = await service.get_evacuation_shelters(coordinates)
    return _ok(_envelope(coordinates, shelters=shelters))


@app.get("/api/disaster-info/{lat}/{lng}/history")
async def get_history(lat: str, lng: str):
    coordinates = coordinate_parser.parse(lat, lng)
    history = await service.get_disaster_history(coordinates)
    return _ok(_envelope(coordinates, disasterHistory=history))
