# meetpoint/api/v1/dependencies.py
from typing import Iterator

from fastapi import Depends

from meetpoint.core.config import settings
from meetpoint.services.meeting_point_solver import MeetingPointSolver
from meetpoint.services.ors_client import OpenRouteServiceClient


def get_ors_client() -> Iterator[OpenRouteServiceClient]:
    """
    One ORS client per request; the credential is only checked when a call is made,
    so geographic requests work without it.
    """
    client = OpenRouteServiceClient(
        api_key=settings.OPENROUTESERVICE_API_KEY,
        base_url=settings.ORS_BASE_URL,
        profile=settings.ORS_PROFILE,
        timeout_s=settings.REQUEST_TIMEOUT_S,
    )
    try:
        yield client
    finally:
        client.close()


def get_meeting_point_solver(
    client: OpenRouteServiceClient = Depends(get_ors_client),
) -> MeetingPointSolver:
    return MeetingPointSolver(oracle=client, router=client)
