# meetpoint/main.py

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from meetpoint.api.v1 import (
    routes_driving_route,
    routes_health,
    routes_meeting_point,
    routes_search_radius,
)
from meetpoint.core.config import settings
from meetpoint.core.errors import MeetingPointError
from meetpoint.core.logger import logger


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


async def meeting_point_error_handler(request: Request, exc: MeetingPointError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.url.path}: {exc.message} "
            f"{exc.details or ''}".rstrip()
        )
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": str(exc) or "Failed to compute meeting point"},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Fair meeting point solver for groups of travellers.",
    )

    # Routers
    app.include_router(routes_health.router, prefix="", tags=["health"])
    app.include_router(routes_meeting_point.router, prefix="", tags=["meeting-point"])
    app.include_router(routes_driving_route.router, prefix="", tags=["routing"])
    app.include_router(routes_search_radius.router, prefix="", tags=["meeting-point"])

    # Every error leaves the API as {"error": ...}
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(MeetingPointError, meeting_point_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} ready ({settings.ENVIRONMENT})")
    return app


app = create_app()
