# meetpoint/api/v1/routes_meeting_point.py
from fastapi import APIRouter, Depends

from meetpoint.models.meeting import MeetingPointRequest, MeetingPointResponse
from meetpoint.services.meeting_point_solver import MeetingPointSolver
from meetpoint.api.v1.dependencies import get_meeting_point_solver

router = APIRouter(
    prefix="/meeting-point",
    tags=["meeting-point"],
)


@router.post(
    "/",
    response_model=MeetingPointResponse,
    response_model_exclude_unset=True,
    summary="Compute a fair meeting point for a group",
)
def compute_meeting_point(
    request: MeetingPointRequest,
    solver: MeetingPointSolver = Depends(get_meeting_point_solver),
) -> MeetingPointResponse:
    """
    Compute a meeting point for 2 or more participants.

    - transport="car": minimise the spread of driving times (OpenRouteService).
    - transport="train": not implemented (501).
    - anything else: spherical centroid of the participants.
    """
    result = solver.solve(request.coordinates, request.mode)
    return MeetingPointResponse.from_result(result)
