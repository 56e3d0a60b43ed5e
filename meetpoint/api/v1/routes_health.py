# meetpoint/api/v1/routes_health.py
from fastapi import APIRouter
from meetpoint.core.config import settings

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("/", summary="Health check")
async def health_check():
    """
    Liveness plus which solving modes can be served right now.

    Car mode and driving routes need an OpenRouteService key; without one they
    answer 503 while geographic mode keeps working.
    """
    ors_configured = bool(settings.OPENROUTESERVICE_API_KEY)
    modes = ["geographic", "car"] if ors_configured else ["geographic"]
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "ors_configured": ors_configured,
        "ors_profile": settings.ORS_PROFILE,
        "available_modes": modes,
    }
