# meetpoint/api/v1/routes_driving_route.py
from fastapi import APIRouter, Depends

from meetpoint.models.routing import DrivingRouteRequest, DrivingRouteResponse
from meetpoint.services.ors_client import OpenRouteServiceClient
from meetpoint.api.v1.dependencies import get_ors_client

router = APIRouter(
    prefix="/driving-route",
    tags=["routing"],
)


@router.post(
    "/",
    response_model=DrivingRouteResponse,
    summary="Driving route geometry between two points",
)
def driving_route(
    request: DrivingRouteRequest,
    client: OpenRouteServiceClient = Depends(get_ors_client),
) -> DrivingRouteResponse:
    """
    Route polyline as [lat, lon] pairs; empty when no route is available.
    """
    route = client.route_geometry(request.start, request.end)
    if route is None:
        return DrivingRouteResponse(coordinates=[])
    return DrivingRouteResponse(coordinates=[[c.lat, c.lon] for c in route])
