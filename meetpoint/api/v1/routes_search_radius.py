# meetpoint/api/v1/routes_search_radius.py
from fastapi import APIRouter

from meetpoint.models.routing import SearchRadiusRequest, SearchRadiusResponse
from meetpoint.services.geodesy import (
    default_search_radius_km,
    max_pairwise_distance_km,
    max_spread_km,
    spherical_centroid,
)

router = APIRouter(
    prefix="/search-radius",
    tags=["meeting-point"],
)


@router.post(
    "/",
    response_model=SearchRadiusResponse,
    summary="Default point-of-interest search radius for a trip",
)
async def search_radius(request: SearchRadiusRequest) -> SearchRadiusResponse:
    """
    Pick 1, 15 or 50 km depending on how far apart the participants are.

    Also reports how far the farthest participant is from the group's centroid.
    """
    centroid = spherical_centroid(request.coordinates)
    return SearchRadiusResponse(
        radius_km=default_search_radius_km(request.coordinates),
        diameter_km=max_pairwise_distance_km(request.coordinates),
        max_spread_km=max_spread_km(centroid, request.coordinates),
    )
