# tests/test_meeting_point_solver.py
import pytest

from meetpoint.core.errors import (
    ConfigurationError,
    NotImplementedModeError,
    UpstreamServiceError,
)
from meetpoint.models.geo import Coordinate
from meetpoint.models.meeting import TransportMode
from meetpoint.services.geodesy import spherical_centroid
from meetpoint.services.meeting_point_solver import MeetingPointSolver, SearchStrategy

from conftest import FakeOracle, FakeRouter, per_candidate

ORIGINS = [Coordinate(lat=52.0, lon=13.0), Coordinate(lat=52.2, lon=13.4)]
SEED = spherical_centroid(ORIGINS)


def test_geographic_mode_returns_centroid_without_oracle():
    oracle = FakeOracle(per_candidate(lambda call, c: [0.0, 0.0]))
    result = MeetingPointSolver(oracle=oracle).solve(ORIGINS, TransportMode.GEOGRAPHIC)
    assert result.chosen == SEED
    assert result.travel_times is None
    assert oracle.calls == []


def test_train_mode_is_not_implemented():
    with pytest.raises(NotImplementedModeError):
        MeetingPointSolver().solve(ORIGINS, TransportMode.TRAIN)


def test_car_mode_without_oracle_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        MeetingPointSolver().solve(ORIGINS, TransportMode.CAR)


def test_fair_center_needs_a_single_oracle_call():
    oracle = FakeOracle(per_candidate(lambda call, c: [600.0, 600.0] if c == SEED else [600.0, 900.0]))
    router = FakeRouter()

    result = MeetingPointSolver(oracle=oracle, router=router).solve(ORIGINS, TransportMode.CAR)

    assert result.chosen == SEED
    assert result.travel_times == (600.0, 600.0)
    assert result.range_sec == 0.0
    assert len(oracle.calls) == 1
    assert len(oracle.calls[0]) == 9
    assert router.calls == []


def test_refinement_is_used_when_it_improves():
    def times(call, c):
        if call == 0:
            return [1000.0, 1700.0] if c == SEED else [1000.0, 2000.0]
        # The refined grid finds a fairer spot east of the seed
        return [1000.0, 1100.0] if c.lon > SEED.lon + 0.015 and c.lat == SEED.lat else [1000.0, 1900.0]

    oracle = FakeOracle(per_candidate(times))
    result = MeetingPointSolver(oracle=oracle, router=FakeRouter()).solve(ORIGINS, TransportMode.CAR)

    assert len(oracle.calls) == 2
    assert len(oracle.calls[1]) == 25
    assert result.range_sec == 100.0
    assert result.chosen.lon == pytest.approx(SEED.lon + 0.02)


def test_refinement_never_regresses():
    def times(call, c):
        if call == 0:
            return [1000.0, 1700.0] if c == SEED else [1000.0, 2000.0]
        return [1000.0, 1900.0]

    oracle = FakeOracle(per_candidate(times))
    result = MeetingPointSolver(oracle=oracle, router=FakeRouter()).solve(ORIGINS, TransportMode.CAR)

    assert len(oracle.calls) == 2
    assert result.chosen == SEED
    assert result.travel_times == (1000.0, 1700.0)
    assert result.range_sec == 700.0


def test_recentering_stops_after_first_non_improving_iteration():
    def times(call, c):
        if call == 0:
            return [1000.0, 3100.0] if c == SEED else [1000.0, 3500.0]
        if call == 1:
            return [1000.0, 3500.0]
        # Every recentering grid is exactly as unfair as the baseline
        return [1000.0, 3100.0]

    oracle = FakeOracle(per_candidate(times))
    router = FakeRouter()
    result = MeetingPointSolver(oracle=oracle, router=router).solve(ORIGINS, TransportMode.CAR)

    # initial + refinement + one recentering attempt
    assert len(oracle.calls) == 3
    assert len(oracle.calls[2]) == 49
    assert len(router.calls) == len(ORIGINS)
    assert result.chosen == SEED
    assert result.range_sec == 2100.0


def test_recentering_runs_at_most_three_times():
    ranges = {0: 3000.0, 1: 3000.0, 2: 2500.0, 3: 2200.0, 4: 1900.0}

    def times(call, c):
        return [1000.0, 1000.0 + ranges[call]]

    oracle = FakeOracle(per_candidate(times))
    router = FakeRouter()
    result = MeetingPointSolver(oracle=oracle, router=router).solve(ORIGINS, TransportMode.CAR)

    assert len(oracle.calls) == 5
    assert len(router.calls) == 3 * len(ORIGINS)
    assert result.range_sec == 1900.0


def test_recentering_ends_once_spread_is_acceptable():
    ranges = {0: 3000.0, 1: 3000.0, 2: 100.0}

    def times(call, c):
        return [1000.0, 1000.0 + ranges[call]]

    oracle = FakeOracle(per_candidate(times))
    router = FakeRouter()
    result = MeetingPointSolver(oracle=oracle, router=router).solve(ORIGINS, TransportMode.CAR)

    assert len(oracle.calls) == 3
    assert len(router.calls) == len(ORIGINS)
    assert result.range_sec == 100.0


def test_recentering_without_route_geometry_keeps_previous_best():
    oracle = FakeOracle(per_candidate(lambda call, c: [1000.0, 4000.0]))
    router = FakeRouter(available=False)
    result = MeetingPointSolver(oracle=oracle, router=router).solve(ORIGINS, TransportMode.CAR)

    assert len(oracle.calls) == 2
    assert len(router.calls) == len(ORIGINS)
    assert result.range_sec == 3000.0


def test_oracle_failure_aborts_the_whole_solve():
    def times(call, c):
        if call == 1:
            raise UpstreamServiceError("OpenRouteService request failed", details="boom")
        return [1000.0, 2000.0]

    oracle = FakeOracle(per_candidate(times))
    with pytest.raises(UpstreamServiceError):
        MeetingPointSolver(oracle=oracle, router=FakeRouter()).solve(ORIGINS, TransportMode.CAR)


def test_empty_origins_are_rejected():
    with pytest.raises(ValueError):
        MeetingPointSolver().solve([], TransportMode.GEOGRAPHIC)


def test_strategy_without_run_cannot_be_built():
    class Incomplete(SearchStrategy):
        name = "incomplete"

    with pytest.raises(TypeError):
        Incomplete()
