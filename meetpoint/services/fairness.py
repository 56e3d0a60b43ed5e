# meetpoint/services/fairness.py
from typing import Optional, Sequence

from meetpoint.core.errors import MatrixShapeError, NoReachableCandidateError
from meetpoint.models.geo import Coordinate
from meetpoint.models.meeting import DurationMatrix, SolverResult


def evaluate_candidate(
    candidate: Coordinate, times: Sequence[Optional[float]]
) -> SolverResult:
    """
    Fairness figures for one candidate given the per-origin durations.

    Range and max only consider reachable origins; unreachable ones are counted.
    """
    reachable = [t for t in times if t is not None]
    if reachable:
        max_sec = max(reachable)
        range_sec = max_sec - min(reachable)
    else:
        max_sec = range_sec = float("inf")

    return SolverResult(
        chosen=candidate,
        travel_times=tuple(times),
        range_sec=range_sec,
        max_sec=max_sec,
        unreachable=len(times) - len(reachable),
    )


def select_best(
    origins: Sequence[Coordinate],
    candidates: Sequence[Coordinate],
    matrix: DurationMatrix,
) -> SolverResult:
    """
    Pick the candidate whose travel times are the most even across origins.

    Candidates are ordered by (unreachable origins, range, max): fewer
    unreachable origins first, then the smallest spread, then the lowest
    worst-case time. On a complete tie the earlier candidate is kept.
    """
    if matrix.n_origins != len(origins) or (
        origins and matrix.n_candidates != len(candidates)
    ):
        raise MatrixShapeError(
            f"Duration matrix is {matrix.n_origins}x{matrix.n_candidates}, "
            f"expected {len(origins)}x{len(candidates)}"
        )
    if not candidates:
        raise ValueError("select_best() needs at least one candidate")

    best: Optional[SolverResult] = None
    for j, candidate in enumerate(candidates):
        result = evaluate_candidate(candidate, matrix.column(j))
        if best is None or result.rank < best.rank:
            best = result

    if best.unreachable == len(origins):
        raise NoReachableCandidateError(
            "No candidate meeting point is reachable by any participant"
        )
    return best
