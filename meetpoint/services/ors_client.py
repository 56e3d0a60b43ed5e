# meetpoint/services/ors_client.py
"""
OpenRouteService adapter: travel-time matrix (the solver's oracle) and
driving route geometry.

This is the only module that knows ORS expects [lon, lat] pairs; everything it
returns uses `Coordinate`.
"""
from time import perf_counter
from typing import Any, Dict, List, Optional, Protocol, Sequence

import requests

from meetpoint.core.errors import (
    ConfigurationError,
    MalformedResponseError,
    UpstreamServiceError,
)
from meetpoint.core.logger import logger
from meetpoint.models.geo import Coordinate
from meetpoint.models.meeting import DurationMatrix

# Response bodies attached to errors are cut to this many characters
ERROR_BODY_LIMIT = 200


class TravelTimeOracle(Protocol):
    def duration_matrix(
        self, origins: Sequence[Coordinate], candidates: Sequence[Coordinate]
    ) -> DurationMatrix:
        ...


class RouteGeometryProvider(Protocol):
    def route_geometry(
        self, origin: Coordinate, destination: Coordinate
    ) -> Optional[List[Coordinate]]:
        ...


def _to_lon_lat(c: Coordinate) -> List[float]:
    return [c.lon, c.lat]


def _from_lon_lat(position: Sequence[float]) -> Coordinate:
    # ORS positions are [lon, lat] or [lon, lat, elevation]
    return Coordinate(lat=float(position[1]), lon=float(position[0]))


class OpenRouteServiceClient:
    """
    Thin synchronous client for the ORS matrix and directions endpoints.

    No retries are performed; every failure surfaces to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openrouteservice.org",
        profile: str = "driving-car",
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    @property
    def matrix_url(self) -> str:
        return f"{self.base_url}/v2/matrix/{self.profile}"

    @property
    def directions_url(self) -> str:
        return f"{self.base_url}/v2/directions/{self.profile}/geojson"

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def duration_matrix(
        self, origins: Sequence[Coordinate], candidates: Sequence[Coordinate]
    ) -> DurationMatrix:
        """
        Driving durations (seconds) from every origin to every candidate.

        matrix.rows[i][j] is the time from origins[i] to candidates[j]; cells
        ORS cannot route are None.
        """
        n = len(origins)
        m = len(candidates)
        payload = {
            "locations": [_to_lon_lat(c) for c in (*origins, *candidates)],
            "sources": list(range(n)),
            "destinations": list(range(n, n + m)),
            "metrics": ["duration"],
        }

        t0 = perf_counter()
        response = self._post(self.matrix_url, payload)
        logger.info(
            f"ORS matrix {n}x{m} answered {response.status_code} "
            f"in {(perf_counter() - t0) * 1000.0:.2f} ms"
        )

        if not response.ok:
            raise UpstreamServiceError(
                "OpenRouteService request failed",
                details=response.text[:ERROR_BODY_LIMIT],
                upstream_status=response.status_code,
            )

        durations = self._json(response).get("durations")
        if not isinstance(durations, list) or len(durations) != n:
            raise MalformedResponseError(
                "Invalid matrix response",
                details=f"expected {n} rows, got "
                f"{len(durations) if isinstance(durations, list) else 'none'}",
            )

        rows = []
        for i, row in enumerate(durations):
            if not isinstance(row, list) or len(row) != m:
                raise MalformedResponseError(
                    "Invalid matrix response",
                    details=f"row {i} does not have {m} columns",
                )
            try:
                rows.append(tuple(None if cell is None else float(cell) for cell in row))
            except (TypeError, ValueError) as exc:
                raise MalformedResponseError(
                    "Invalid matrix response",
                    details=f"row {i} has a non-numeric cell",
                ) from exc

        return DurationMatrix(rows=tuple(rows))

    def route_geometry(
        self, origin: Coordinate, destination: Coordinate
    ) -> Optional[List[Coordinate]]:
        """
        Driving route polyline from origin to destination.

        Returns None when ORS answers with an error status or the geometry has
        fewer than two points.
        """
        payload = {"coordinates": [_to_lon_lat(origin), _to_lon_lat(destination)]}

        response = self._post(self.directions_url, payload)
        if not response.ok:
            logger.warning(
                f"OpenRouteService directions failed: {response.status_code} "
                f"{response.text[:ERROR_BODY_LIMIT]}"
            )
            return None

        positions = self._extract_positions(self._json(response))
        if not isinstance(positions, list) or len(positions) < 2:
            logger.warning("OpenRouteService: no route geometry in response")
            return None

        return [_from_lon_lat(p) for p in positions]

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _post(self, url: str, payload: Dict[str, Any]) -> requests.Response:
        if not self.api_key:
            raise ConfigurationError("OpenRouteService API key not configured")

        try:
            return self.session.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": self.api_key,
                },
                timeout=self.timeout_s,
            )
        except requests.RequestException as exc:
            raise UpstreamServiceError(
                "OpenRouteService request failed", details=str(exc)[:ERROR_BODY_LIMIT]
            ) from exc

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                "OpenRouteService returned invalid JSON",
                details=response.text[:ERROR_BODY_LIMIT],
            ) from exc
        if not isinstance(data, dict):
            raise MalformedResponseError("OpenRouteService returned unexpected JSON")
        return data

    @staticmethod
    def _extract_positions(data: Dict[str, Any]) -> Any:
        """
        Coordinates of a GeoJSON FeatureCollection (first feature) or single Feature.
        """
        features = data.get("features")
        if isinstance(features, list) and features:
            geometry = (features[0] or {}).get("geometry") or {}
            return geometry.get("coordinates")
        if data.get("type") == "Feature":
            geometry = data.get("geometry") or {}
            return geometry.get("coordinates")
        return None
