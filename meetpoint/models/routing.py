# meetpoint/models/routing.py

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from meetpoint.models.geo import Coordinate


class DrivingRouteRequest(BaseModel):
    """
    Request body for the /driving-route endpoint.
    """
    start: Coordinate
    end: Coordinate


class DrivingRouteResponse(BaseModel):
    """
    Driving route geometry as a list of [lat, lon] pairs (Leaflet order), e.g.:
    [
        [52.5200, 13.4050],
        [52.5170, 13.3889],
        ...
    ]

    Empty when the directions service fails or returns degenerate geometry.
    """
    coordinates: List[List[float]]


class SearchRadiusRequest(BaseModel):
    """
    Request body for the /search-radius endpoint.
    """
    coordinates: List[Coordinate] = Field(..., min_length=2)


class SearchRadiusResponse(BaseModel):
    """
    Default point-of-interest search radius for a trip, derived from its diameter
    (largest distance between any two participants).
    """

    model_config = ConfigDict(populate_by_name=True)

    radius_km: int = Field(..., alias="radiusKm")
    diameter_km: float = Field(..., alias="diameterKm")
    # Distance from the group centroid to the farthest participant
    max_spread_km: float = Field(..., alias="maxSpreadKm")
