# meetpoint/models/meeting.py

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from meetpoint.core.errors import MatrixShapeError
from meetpoint.models.geo import Coordinate

MIN_PARTICIPANTS = 2


class TransportMode(str, Enum):
    GEOGRAPHIC = "geographic"
    CAR = "car"
    TRAIN = "train"

    @classmethod
    def from_value(cls, value: Any) -> "TransportMode":
        """
        Map a raw request value to a mode; anything but "car"/"train" is geographic.
        """
        if value == cls.CAR.value:
            return cls.CAR
        if value == cls.TRAIN.value:
            return cls.TRAIN
        return cls.GEOGRAPHIC


class DurationMatrix(BaseModel):
    """
    Travel durations in seconds indexed as rows[origin][candidate].

    None marks an unreachable cell.
    """

    model_config = ConfigDict(frozen=True)

    rows: Tuple[Tuple[Optional[float], ...], ...]

    @model_validator(mode="after")
    def _check_rectangular(self) -> "DurationMatrix":
        widths = {len(row) for row in self.rows}
        if len(widths) > 1:
            raise MatrixShapeError(
                f"Duration matrix is not rectangular (row widths: {sorted(widths)})"
            )
        return self

    @property
    def n_origins(self) -> int:
        return len(self.rows)

    @property
    def n_candidates(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def column(self, j: int) -> Tuple[Optional[float], ...]:
        return tuple(row[j] for row in self.rows)


class SolverResult(BaseModel):
    """
    Best meeting point found by one solver stage.

    - travel_times: one entry per origin (input order), None when unreachable;
      None altogether for the geographic mode.
    - range_sec / max_sec: spread and worst case over reachable entries.
    - unreachable: number of origins that cannot reach `chosen`.
    """

    model_config = ConfigDict(frozen=True)

    chosen: Coordinate
    travel_times: Optional[Tuple[Optional[float], ...]] = None
    range_sec: float = 0.0
    max_sec: float = 0.0
    unreachable: int = 0

    @property
    def score(self) -> Tuple[int, float]:
        """Key used to decide whether a later stage improved on an earlier one."""
        return (self.unreachable, self.range_sec)

    @property
    def rank(self) -> Tuple[int, float, float]:
        """Key used to pick the best candidate inside one stage (ties -> lower max)."""
        return (self.unreachable, self.range_sec, self.max_sec)

    def reachable_times(self) -> List[float]:
        return [t for t in (self.travel_times or ()) if t is not None]


class MeetingPointRequest(BaseModel):
    """
    Request body for the /meeting-point endpoint.
    """

    coordinates: Optional[List[Coordinate]] = None
    # Free-form on purpose: unknown values fall back to the geographic mode.
    transport: Any = None

    @model_validator(mode="after")
    def _check_participants(self) -> "MeetingPointRequest":
        if not self.coordinates or len(self.coordinates) < MIN_PARTICIPANTS:
            raise ValueError(f"At least {MIN_PARTICIPANTS} coordinates required")
        return self

    @property
    def mode(self) -> TransportMode:
        return TransportMode.from_value(self.transport)


class MeetingPointResponse(BaseModel):
    """
    Response for the /meeting-point endpoint.

    `travelTimes` is only set in car mode and is aligned with the input order.
    """

    model_config = ConfigDict(populate_by_name=True)

    lat: float
    lon: float
    travel_times: Optional[List[Optional[float]]] = Field(default=None, alias="travelTimes")

    @classmethod
    def from_result(cls, result: SolverResult) -> "MeetingPointResponse":
        if result.travel_times is None:
            return cls(lat=result.chosen.lat, lon=result.chosen.lon)
        return cls(
            lat=result.chosen.lat,
            lon=result.chosen.lon,
            travel_times=list(result.travel_times),
        )
