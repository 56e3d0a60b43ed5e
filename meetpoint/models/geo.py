# meetpoint/models/geo.py

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """
    Latitude/longitude coordinate in decimal degrees (WGS84-like, no datum handling).

    Immutable value type: two coordinates are equal when their values are equal.
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., allow_inf_nan=False)
    lon: float = Field(..., allow_inf_nan=False)
