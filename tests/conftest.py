# tests/conftest.py
import os
import sys
from typing import Callable, List, Optional, Sequence

import pytest

# Add the project root directory to sys.path so that "import meetpoint" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient  # noqa: E402

from meetpoint.main import app  # noqa: E402
from meetpoint.models.geo import Coordinate  # noqa: E402
from meetpoint.models.meeting import DurationMatrix  # noqa: E402

# (call index, origins, candidates) -> rows[origin][candidate]
MatrixHandler = Callable[[int, Sequence[Coordinate], Sequence[Coordinate]], List[List[Optional[float]]]]


class FakeOracle:
    """
    In-memory travel-time oracle; records every call it receives.
    """

    def __init__(self, handler: MatrixHandler) -> None:
        self.handler = handler
        self.calls: List[List[Coordinate]] = []

    def duration_matrix(self, origins, candidates) -> DurationMatrix:
        rows = self.handler(len(self.calls), origins, candidates)
        self.calls.append(list(candidates))
        return DurationMatrix(rows=tuple(tuple(row) for row in rows))


def per_candidate(times_for: Callable[[int, Coordinate], List[Optional[float]]]) -> MatrixHandler:
    """
    Build a matrix handler from a function giving the per-origin times of one candidate.
    """

    def handler(call, origins, candidates):
        columns = [times_for(call, c) for c in candidates]
        return [[col[i] for col in columns] for i in range(len(origins))]

    return handler


class FakeRouter:
    """
    Route provider returning a straight two-point line (or None when disabled).
    """

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.calls: List[tuple] = []

    def route_geometry(self, origin, destination):
        self.calls.append((origin, destination))
        if not self.available:
            return None
        return [origin, destination]


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session that replays queued responses.
    """

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls: List[dict] = []
        self.closed = False

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def berlin_munich():
    return [Coordinate(lat=52.52, lon=13.405), Coordinate(lat=48.137, lon=11.575)]
